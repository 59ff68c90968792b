"""Assessment builder and runtime schemas."""

from collections.abc import Mapping
from typing import Any, Literal, Optional
from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from api.schemas.common import CamelModel, UtcDatetime
from core.engines.assessments import normalize_question, normalize_section

QuestionType = Literal["single", "multi", "short", "long", "number", "file"]


class QuestionSchema(CamelModel):
    """
    A question. Legacy payloads (``numeric`` type, ``label``, ``showIf``) are
    normalised before validation; unknown extra keys are kept.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    type: QuestionType
    title: str
    required: bool = False
    options: list[str] = Field(default_factory=list)
    min: Optional[float] = None
    max: Optional[float] = None
    max_length: Optional[int] = Field(None, ge=1)
    condition: Optional[dict[str, Any]] = Field(
        None, description="{questionId, equalsValue}: shown only when that answer equals the value"
    )

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        """Map legacy shapes onto the canonical question."""
        if isinstance(data, Mapping):
            return normalize_question(data)
        return data


class SectionSchema(CamelModel):
    """A titled group of questions."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    title: str
    description: str = ""
    questions: list[QuestionSchema] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize(cls, data: Any) -> Any:
        """Fill in section ids and titles; questions normalise themselves."""
        if isinstance(data, Mapping):
            section = normalize_section({**data, "questions": []})
            return {**section, "questions": data.get("questions") or []}
        return data


class AssessmentSave(CamelModel):
    """Full replacement of a job's assessment."""

    sections: list[SectionSchema] = Field(default_factory=list)
    version: Optional[int] = Field(None, description="Defaults to 1")

    @field_validator("sections", mode="before")
    @classmethod
    def non_list_sections(cls, v: Any) -> Any:
        """Anything that is not a list means no sections."""
        return v if isinstance(v, list) else []


class AssessmentResponse(CamelModel):
    """Stored assessment (or an empty skeleton)."""

    job_id: int
    version: int
    updated_at: UtcDatetime
    sections: list[dict[str, Any]] = Field(default_factory=list)


class AnswersRequest(CamelModel):
    """Answers to check without storing them."""

    answers: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(CamelModel):
    """Per-question errors for the visible questions."""

    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class SubmissionCreate(CamelModel):
    """A candidate's answers."""

    candidate_id: Optional[int] = None
    answers: dict[str, Any] = Field(default_factory=dict)


class SubmissionCreated(CamelModel):
    """Acknowledgement of a stored submission."""

    id: int
    job_id: int
    candidate_id: Optional[int] = None
    created_at: UtcDatetime


class SubmissionResponse(SubmissionCreated):
    """Stored submission including the answers."""

    answers: dict[str, Any] = Field(default_factory=dict)


class AssessmentExistsResponse(CamelModel):
    """``jobId -> has an assessment with at least one section``."""

    exists: dict[str, bool]
