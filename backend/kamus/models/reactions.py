import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..core.ids import new_id


class ReactionType(str, enum.Enum):
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"


class Reaction(Base):
    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint("definition_id", "user_id", name="uq_reactions_definition_user"),
    )

    id = Column(String(20), primary_key=True, default=new_id)
    type = Column(Enum(ReactionType, name="reaction_type"), nullable=False)

    user_id = Column(String(20), ForeignKey("users.id"), nullable=False)
    definition_id = Column(String(20), ForeignKey("definitions.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)  # retracted when set

    definition = relationship("Definition", back_populates="reactions")
