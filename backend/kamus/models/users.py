import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..core.ids import new_id


class RoleName(str, enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Role(Base):
    __tablename__ = "roles"

    id = Column(String(20), primary_key=True, default=new_id)
    name = Column(Enum(RoleName, name="role_name"), unique=True, nullable=False)

    users = relationship("User", back_populates="role")


class User(Base):
    __tablename__ = "users"

    id = Column(String(20), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    username = Column(String, unique=True, nullable=False, index=True)

    # Assigned at creation, never changed afterwards
    role_id = Column(String(20), ForeignKey("roles.id"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    role = relationship("Role", back_populates="users")
    definitions = relationship("Definition", back_populates="user")
