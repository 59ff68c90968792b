"""Recruiter notes attached to candidates."""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, Text, ForeignKey, DateTime, JSON, Index
from database.engine import Base
from core.utils.datetime import now
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.candidates import Candidate


class Note(Base):
    """
    Free-text note with the ``@handles`` it mentions.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    candidate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    mentions: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )

    candidate: Mapped["Candidate"] = relationship("Candidate", back_populates="notes")

    __table_args__ = (Index("ix_notes_candidate_created", "candidate_id", "created_at"),)
