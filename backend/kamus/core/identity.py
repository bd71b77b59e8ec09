from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..config import settings
from ..models import Role, RoleName, User
from . import messages
from .database import get_db
from .errors import Forbidden, PersistenceError, Unauthenticated
from .usernames import generate_username

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
SESSION_KEY = "userId"
USERNAME_ATTEMPTS = 10


@dataclass(frozen=True)
class UserIdentity:
    id: str
    username: str
    email: str
    role: RoleName

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN


# ---------- Session token ----------


def issue_session_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.session_max_age_minutes)
    )
    return jwt.encode(
        {SESSION_KEY: user_id, "exp": expire},
        settings.session_secret,
        algorithm=ALGORITHM,
    )


def read_session_token(token: Optional[str]) -> Optional[str]:
    """Return the user id carried by a session token, or None if it is unusable."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get(SESSION_KEY)
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


# ---------- Resolver ----------


def resolve(db: Session, token: Optional[str]) -> Optional[UserIdentity]:
    user_id = read_session_token(token)
    if user_id is None:
        return None

    user = (
        db.query(User)
        .options(joinedload(User.role))
        .filter(User.id == user_id)
        .first()
    )
    if not user:
        return None

    return UserIdentity(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.name,
    )


def require_user(db: Session, token: Optional[str]) -> str:
    identity = resolve(db, token)
    if identity is None:
        raise Unauthenticated()
    return identity.id


def require_admin(db: Session, token: Optional[str]) -> UserIdentity:
    identity = resolve(db, token)
    if identity is None:
        raise Unauthenticated()
    if not identity.is_admin:
        raise Forbidden()
    return identity


# ---------- Login collaborator ----------


def _role(db: Session, name: RoleName) -> Role:
    role = db.query(Role).filter(Role.name == name).first()
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.flush()
    return role


def _unused_username(db: Session) -> str:
    for _ in range(USERNAME_ATTEMPTS):
        candidate = generate_username()
        if not db.query(User.id).filter(User.username == candidate).first():
            return candidate
    raise PersistenceError(messages.USERNAME_GENERATION_FAILED)


def upsert_user_by_email(
    db: Session, email: str, role: RoleName = RoleName.MEMBER
) -> User:
    """
    Find the user owning `email`, creating it with a generated username
    when this is its first login. Existing users are returned unchanged.
    """
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    try:
        user = User(
            email=email,
            username=_unused_username(db),
            role=_role(db, role),
        )
        db.add(user)
        db.commit()
    except IntegrityError:
        # A concurrent login created the same email first.
        db.rollback()
        user = db.query(User).filter(User.email == email).first()
        if user:
            return user
        logger.exception("Failed to find or create user for %s", email)
        raise PersistenceError(messages.LOGIN_FAILED)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to find or create user for %s", email)
        raise PersistenceError(messages.LOGIN_FAILED) from exc

    db.refresh(user)
    return user


# ---------- FastAPI dependencies ----------


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name)


def optional_identity(
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
) -> Optional[UserIdentity]:
    return resolve(db, token)


def current_user_id(
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
) -> str:
    return require_user(db, token)


def current_admin(
    token: Optional[str] = Depends(session_token),
    db: Session = Depends(get_db),
) -> UserIdentity:
    return require_admin(db, token)
