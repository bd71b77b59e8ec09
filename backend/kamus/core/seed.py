import logging
from typing import Iterable

from sqlalchemy.orm import Session

from ..models import Role, RoleName, User
from .identity import upsert_user_by_email

logger = logging.getLogger(__name__)


def seed_initial_data(db: Session, admin_emails: Iterable[str] = ()) -> None:
    """Seed roles, then make sure every configured admin email has an ADMIN account."""
    for name in RoleName:
        if db.query(Role).filter(Role.name == name).count() == 0:
            db.add(Role(name=name))
    db.commit()

    for email in admin_emails:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            if existing.role.name != RoleName.ADMIN:
                # Roles are fixed at creation; an existing member stays a member.
                logger.warning("Configured admin %s already exists as %s", email, existing.role.name.value)
            continue
        user = upsert_user_by_email(db, email, role=RoleName.ADMIN)
        logger.info("Seeded admin user %s (%s)", user.username, email)
