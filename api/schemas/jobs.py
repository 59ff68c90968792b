"""Job-related Pydantic schemas."""

from typing import Any, Optional
from pydantic import ConfigDict, Field, field_validator

from api.schemas.common import CamelModel, UtcDatetime


def _coerce_tags(v: Any) -> Any:
    if v is None:
        return v
    if not isinstance(v, list):
        return []
    return [str(tag) for tag in v]


class JobCreateRequest(CamelModel):
    """Schema for creating a job. The slug and board position are derived."""

    title: str = Field(default="", max_length=200, description="Job title (required)")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        """Strip whitespace from the title."""
        if isinstance(v, str):
            return v.strip()
        return v if v is not None else ""

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> Any:
        """Anything that is not a list becomes an empty tag list."""
        return _coerce_tags(v) if v is not None else []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Senior Frontend Engineer", "tags": ["frontend", "remote"]}
        }
    )


class JobUpdateRequest(CamelModel):
    """Schema for patching a job. Omitted fields are left untouched."""

    title: Optional[str] = Field(None, max_length=200, description="New title")
    tags: Optional[list[str]] = Field(None, description="Replacement tag list")
    status: Optional[str] = Field(
        None, description="active or archived; other values are ignored"
    )

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> Any:
        """Non-list tags are treated as omitted."""
        if v is not None and not isinstance(v, list):
            return None
        return _coerce_tags(v)


class JobResponse(CamelModel):
    """Schema for job response."""

    id: int
    title: str
    slug: str
    status: str
    tags: list[str] = Field(default_factory=list)
    order: int
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None


class JobReorderRequest(CamelModel):
    """Move a job from ``fromOrder`` to ``toOrder`` on the board."""

    from_order: int = Field(description="Position the client last saw the job at")
    to_order: int = Field(description="Target position (0-indexed)")


class JobReorderResponse(CamelModel):
    """Acknowledgement echoing the requested move."""

    ok: bool = True
    from_order: int
    to_order: int


class SlugAvailabilityResponse(CamelModel):
    """Whether a slug is free for use."""

    available: bool
    conflict_id: Optional[int] = None
