"""
Jobs Module

Job postings with their slug, archive status, tags and board position.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Integer,
    DateTime,
    JSON,
    Index,
)
from database.engine import Base
from core.utils.datetime import now
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.candidates import Candidate


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """Job posting status."""

    ACTIVE = "active"
    ARCHIVED = "archived"


JOB_STATUSES: tuple[str, ...] = tuple(status.value for status in JobStatus)


# ==================== Job Model ===================== #
class Job(Base):
    """
    Job posting.

    ``order`` is the job's position on the board. Across all jobs the values
    are a dense permutation of ``0..N-1``; only the reorder service moves
    them. No unique constraint is declared on it because a renumbering
    passes through duplicate values inside its transaction.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(80), nullable=False, unique=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=JobStatus.ACTIVE.value, nullable=False, index=True
    )
    tags: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    # Relationships
    candidates: Mapped[list["Candidate"]] = relationship(
        "Candidate", back_populates="job"
    )

    __table_args__ = (Index("ix_jobs_status_order", "status", "order"),)

    def __repr__(self) -> str:
        return f"<Job id={self.id} slug={self.slug!r} order={self.order}>"
