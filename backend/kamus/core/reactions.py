from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Reaction, ReactionType
from . import definitions, messages
from .errors import NotFound, PersistenceError
from .ids import new_id

logger = logging.getLogger(__name__)

Subaction = Literal["upsert", "delete"]

_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _insert_for(db: Session):
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect]
    except KeyError:
        raise RuntimeError(f"reaction upsert is not supported on {dialect}") from None


def set_reaction(
    db: Session,
    user_id: str,
    definition_id: str,
    reaction_type: ReactionType,
    active: bool,
) -> None:
    """
    Record a user's reaction to a definition in one atomic statement.

    The (definition_id, user_id) unique constraint holds one row per pair;
    conflicting writes update that row instead of inserting. Retracting
    (active=False) only stamps deleted_at and leaves the type alone.
    The caller commits.
    """
    now = datetime.utcnow()
    deleted_at = None if active else now

    stmt = _insert_for(db)(Reaction).values(
        id=new_id(),
        type=reaction_type,
        user_id=user_id,
        definition_id=definition_id,
        created_at=now,
        deleted_at=deleted_at,
    )

    if active:
        changes = {"type": stmt.excluded["type"], "deleted_at": None}
    else:
        changes = {"deleted_at": stmt.excluded["deleted_at"]}

    stmt = stmt.on_conflict_do_update(
        index_elements=["definition_id", "user_id"],
        set_=changes,
    )
    db.execute(stmt)


def react(
    db: Session,
    user_id: str,
    definition_id: str,
    reaction_type: ReactionType,
    subaction: Subaction,
) -> None:
    """Apply a like/dislike toggle from the reaction endpoint."""
    if definitions.find_by_id(db, definition_id) is None:
        raise NotFound()

    try:
        set_reaction(
            db,
            user_id=user_id,
            definition_id=definition_id,
            reaction_type=reaction_type,
            active=subaction == "upsert",
        )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Failed to update/create reaction of user %s on definition %s",
            user_id,
            definition_id,
        )
        raise PersistenceError(messages.REACTION_FAILED) from exc
