from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..core.ids import new_id


class Definition(Base):
    __tablename__ = "definitions"
    __table_args__ = (
        Index("ix_definitions_approved_at_id", "approved_at", "id"),
        Index("ix_definitions_created_at_id", "created_at", "id"),
    )

    id = Column(String(20), primary_key=True, default=new_id)
    word = Column(String, nullable=False)
    definition = Column(Text, nullable=False)
    example = Column(Text, nullable=False)

    user_id = Column(String(20), ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    approved_at = Column(DateTime, nullable=True)  # set once by an admin
    deleted_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="definitions")
    reactions = relationship("Reaction", back_populates="definition")
