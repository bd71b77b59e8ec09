from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..models import Definition
from . import messages
from .errors import PersistenceError
from .pagination import PUBLIC_ORDER, Page, paginate

logger = logging.getLogger(__name__)


def _base_query(db: Session) -> Query:
    return (
        db.query(Definition)
        .options(joinedload(Definition.user))
        .filter(Definition.deleted_at.is_(None))
    )


def visible_query(db: Session) -> Query:
    """Approved and not soft-deleted."""
    return _base_query(db).filter(Definition.approved_at.is_not(None))


def pending_query(db: Session) -> Query:
    """Awaiting moderation and not soft-deleted."""
    return _base_query(db).filter(Definition.approved_at.is_(None))


def create(db: Session, word: str, definition: str, example: str, user_id: str) -> str:
    """Store a new submission. It starts pending (approved_at is NULL)."""
    try:
        d = Definition(
            word=word,
            definition=definition,
            example=example,
            user_id=user_id,
        )
        db.add(d)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create definition for user %s", user_id)
        raise PersistenceError(messages.DEFINITION_CREATE_FAILED) from exc

    logger.info("Definition %s submitted by user %s", d.id, user_id)
    return d.id


def find_visible_page(db: Session, cursor: Optional[str], limit: int) -> Page[Definition]:
    return paginate(visible_query(db), PUBLIC_ORDER, cursor, limit)


def find_user_page(
    db: Session, user_id: str, cursor: Optional[str], limit: int
) -> Page[Definition]:
    query = visible_query(db).filter(Definition.user_id == user_id)
    return paginate(query, PUBLIC_ORDER, cursor, limit)


def find_by_id(
    db: Session, definition_id: str, include_unapproved: bool = False
) -> Optional[Definition]:
    query = _base_query(db) if include_unapproved else visible_query(db)
    return query.filter(Definition.id == definition_id).first()


def approve(db: Session, definition_id: str, now: Optional[datetime] = None) -> int:
    """
    Set approved_at on a pending, non-deleted definition.

    The UPDATE is guarded by `approved_at IS NULL`, so a second approval
    (including a concurrent one) changes nothing. Returns the number of
    rows updated (0 or 1). The caller commits.
    """
    return (
        db.query(Definition)
        .filter(
            Definition.id == definition_id,
            Definition.approved_at.is_(None),
            Definition.deleted_at.is_(None),
        )
        .update({Definition.approved_at: now or datetime.utcnow()}, synchronize_session=False)
    )
