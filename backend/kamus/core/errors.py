from __future__ import annotations

from typing import Any, Dict, Optional

from . import messages


class KamusError(Exception):
    """Base class for errors the API layer turns into responses."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(KamusError):
    """No valid session, or the session's user no longer exists."""


class Forbidden(KamusError):
    def __init__(self, message: str = messages.FORBIDDEN) -> None:
        super().__init__(message)


class NotFound(KamusError):
    def __init__(self, message: str = messages.DEFINITION_NOT_FOUND) -> None:
        super().__init__(message)


class ValidationError(KamusError):
    """Field-level validation failure, returned with the submitted form."""

    def __init__(
        self,
        field_errors: Dict[str, str],
        form_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in field_errors.items()))
        self.field_errors = field_errors
        self.form_data = form_data or {}


class PersistenceError(KamusError):
    """
    A backing-store failure. `message` is the generic public text; the
    underlying exception is chained as __cause__ and only ever logged.
    """
