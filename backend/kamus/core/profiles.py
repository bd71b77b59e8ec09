from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import User
from . import messages
from .errors import PersistenceError, Unauthenticated, ValidationError

logger = logging.getLogger(__name__)


def username_taken(db: Session, username: str, exclude_user_id: str) -> bool:
    return (
        db.query(User.id)
        .filter(User.username == username, User.id != exclude_user_id)
        .first()
        is not None
    )


def update_username(db: Session, user_id: str, username: str) -> User:
    taken = ValidationError(
        {"username": messages.USERNAME_TAKEN}, {"username": username}
    )
    if username_taken(db, username, user_id):
        raise taken

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated()

    try:
        user.username = username
        db.commit()
    except IntegrityError:
        # Lost a race with another user claiming the same name.
        db.rollback()
        raise taken
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update user %s", user_id)
        raise PersistenceError(messages.PROFILE_UPDATE_FAILED) from exc

    db.refresh(user)
    return user
