from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Definition
from . import definitions, messages
from .errors import NotFound, PersistenceError
from .identity import UserIdentity
from .pagination import QUEUE_ORDER, Page, paginate

logger = logging.getLogger(__name__)


def pending_page(db: Session, cursor: Optional[str], limit: int) -> Page[Definition]:
    """The moderation queue, oldest submission first."""
    return paginate(definitions.pending_query(db), QUEUE_ORDER, cursor, limit)


def pending_detail(db: Session, definition_id: str) -> Definition:
    d = definitions.find_by_id(db, definition_id, include_unapproved=True)
    if d is None:
        raise NotFound()
    return d


def approve_definition(db: Session, admin: UserIdentity, definition_id: str) -> bool:
    """
    Move a definition from pending to approved.

    Returns True when this call performed the transition and False when the
    definition was already approved; approval is one-way and never
    re-timestamped. Raises NotFound for unknown or soft-deleted ids.
    """
    try:
        updated = definitions.approve(db, definition_id)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to approve definition %s", definition_id)
        raise PersistenceError(messages.DEFINITION_APPROVE_FAILED) from exc

    if updated:
        logger.info("Definition %s approved by %s", definition_id, admin.username)
        return True

    if definitions.find_by_id(db, definition_id, include_unapproved=True) is None:
        raise NotFound()
    return False
