"""
Candidates Module

Candidates on the hiring board and the append-only timeline of their
stage changes.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Integer,
    ForeignKey,
    DateTime,
    Index,
)
from database.engine import Base
from core.engines.stages import DEFAULT_STAGE
from core.utils.datetime import now
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.jobs import Job
    from database.models.notes import Note


# ==================== Candidate Model ===================== #
class Candidate(Base):
    """
    Candidate applying to a job.

    ``stage`` only changes through the stage service, which appends the
    matching TimelineEvent in the same transaction.
    """

    __tablename__ = "candidates"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    job_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("jobs.id"),
        nullable=False,
        index=True,
    )
    stage: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_STAGE, nullable=False, index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    # Relationships
    job: Mapped["Job"] = relationship("Job", back_populates="candidates")
    timeline: Mapped[list["TimelineEvent"]] = relationship(
        "TimelineEvent",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="TimelineEvent.at",
    )
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="candidate", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Candidate id={self.id} stage={self.stage!r}>"


# ==================== Timeline ===================== #
class TimelineEvent(Base):
    """
    One stage change of a candidate. Append-only.
    """

    __tablename__ = "timelines"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    candidate_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("candidates.id", ondelete="CASCADE"),
        nullable=False,
    )
    at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    from_stage: Mapped[str] = mapped_column(String(20), nullable=False)
    to_stage: Mapped[str] = mapped_column(String(20), nullable=False)
    note: Mapped[str | None] = mapped_column(String(500))

    candidate: Mapped["Candidate"] = relationship("Candidate", back_populates="timeline")

    __table_args__ = (Index("ix_timelines_candidate_at", "candidate_id", "at"),)
