"""Candidate-related Pydantic schemas."""

from typing import Any, Optional
from pydantic import Field, field_validator

from api.schemas.common import CamelModel, UtcDatetime


class CandidateCreate(CamelModel):
    """
    Schema for creating a candidate.

    Unknown stages fall back to ``applied``; a missing job id is filled in by
    the API with an existing job.
    """

    name: str = Field(default="", max_length=200, description="Candidate's full name")
    email: str = Field(default="", max_length=255, description="Contact email")
    stage: Optional[str] = Field(None, description="Initial stage (defaults to applied)")
    job_id: Optional[int] = Field(None, description="Job the candidate applies to")

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_fields(cls, v: Any) -> Any:
        """Strip whitespace; treat null as empty."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        """Emails are stored lowercased."""
        return v.lower()

    @field_validator("stage", mode="before")
    @classmethod
    def non_string_stage(cls, v: Any) -> Any:
        """Non-string stages are treated as missing."""
        return v if isinstance(v, str) else None


class CandidateUpdate(CamelModel):
    """Schema for updating a candidate. Omitted fields are left untouched."""

    name: Optional[str] = Field(None, max_length=200, description="Full name")
    email: Optional[str] = Field(None, max_length=255, description="Contact email")
    job_id: Optional[int] = Field(None, description="Move the candidate to another job")
    stage: Optional[str] = Field(None, description="New pipeline stage")
    note: Optional[str] = Field(None, max_length=500, description="Note for the timeline event")


class CandidateResponse(CamelModel):
    """Candidate enriched with the title of its job."""

    id: int
    name: str
    email: str
    job_id: int
    stage: str
    job_title: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class CandidateListResponse(CamelModel):
    """Candidates matching a stage filter."""

    data: list[CandidateResponse]
    total: int


class TimelineEventResponse(CamelModel):
    """One stage change."""

    id: int
    candidate_id: int
    at: UtcDatetime
    from_stage: str
    to_stage: str
    note: Optional[str] = None
