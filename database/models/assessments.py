"""
Assessments Module

One assessment per job (sections and questions stored as JSON, replaced
wholesale on every save) and the immutable submissions made against it.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, ForeignKey, DateTime, JSON, Index
from database.engine import Base
from core.utils.datetime import now
from datetime import datetime
from typing import Any


class Assessment(Base):
    """
    Assessment definition keyed by job.

    ``sections`` holds the canonical section/question dicts produced by
    core.engines.assessments.normalize_section.
    """

    __tablename__ = "assessments"

    job_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("jobs.id"),
        primary_key=True,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    sections: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )


class Submission(Base):
    """
    A candidate's answers to an assessment. Never updated after insert.
    """

    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, nullable=False, autoincrement=True
    )
    job_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("jobs.id"), nullable=False, index=True
    )
    candidate_id: Mapped[int | None] = mapped_column(Integer, index=True)
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )

    __table_args__ = (Index("ix_submissions_job_candidate", "job_id", "candidate_id"),)
