import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from ..core import messages
from ..core.errors import (
    Forbidden,
    NotFound,
    PersistenceError,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if part != "body"]
        field = str(loc[-1]) if loc else "__root__"
        if field in errors:
            continue

        cause = (err.get("ctx") or {}).get("error")
        if cause is not None:
            errors[field] = str(cause)
        elif err.get("type") in ("missing", "string_type") and field in messages.REQUIRED_FIELD:
            errors[field] = messages.REQUIRED_FIELD[field]
        else:
            errors[field] = err.get("msg", "Invalid value")
    return errors


def _validation_response(field_errors: Dict[str, str], form_data: Any) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"fieldErrors": field_errors, "formData": form_data}),
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(Unauthenticated)
    async def unauthenticated_handler(request: Request, exc: Unauthenticated):
        return RedirectResponse("/", status_code=status.HTTP_302_FOUND)

    @app.exception_handler(Forbidden)
    async def forbidden_handler(request: Request, exc: Forbidden):
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"status": False, "message": exc.message},
        )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": exc.message},
        )

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return _validation_response(exc.field_errors, exc.form_data)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        form_data = exc.body if isinstance(exc.body, dict) else {}
        return _validation_response(_field_errors(exc), form_data)

    @app.exception_handler(PersistenceError)
    async def persistence_handler(request: Request, exc: PersistenceError):
        # Detail was logged where the failure happened.
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": False, "message": exc.message},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_handler(request: Request, exc: SQLAlchemyError):
        logger.error(
            "Unhandled database error on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": False, "message": messages.LIST_FAILED},
        )
