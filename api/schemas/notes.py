"""Note schemas."""

from typing import Any, Optional
from pydantic import Field, field_validator

from api.schemas.common import CamelModel, UtcDatetime


class NoteCreate(CamelModel):
    """Schema for adding a note to a candidate."""

    text: str = Field(default="", max_length=5000, description="Note text; @handles are mentions")
    mentions: Optional[list[str]] = Field(
        None, description="Mentioned handles; extracted from the text when omitted"
    )

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Strip whitespace; treat null as empty."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("mentions", mode="before")
    @classmethod
    def validate_mentions(cls, v: Any) -> Any:
        """Non-list mentions are treated as omitted."""
        if not isinstance(v, list):
            return None
        return [str(handle) for handle in v]


class NoteResponse(CamelModel):
    """Schema for note response."""

    id: int
    candidate_id: int
    text: str
    mentions: list[str] = Field(default_factory=list)
    created_at: UtcDatetime
