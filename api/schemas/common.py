"""Common Pydantic schemas shared across the API."""

from datetime import datetime
from typing import Annotated, Any, Generic, TypeVar, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.utils.datetime import ensure_utc


T = TypeVar("T")

# Timestamps read back from SQLite are naive; they are always UTC
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginatedResponse(CamelModel, Generic[T]):
    """Paginated response wrapper."""

    data: list[T] = Field(description="Items on this page")
    page: int = Field(ge=1, description="Current page number (1-indexed)")
    page_size: int = Field(ge=1, description="Items per page")
    total: int = Field(ge=0, description="Total number of matching items")
    total_pages: int = Field(ge=0, description="Total number of pages")


class ListResponse(CamelModel, Generic[T]):
    """Unpaginated list wrapper."""

    data: list[T]


class OkResponse(BaseModel):
    """Acknowledgement for deletes."""

    ok: bool = True


class ErrorDetail(BaseModel):
    """Body of an error response."""

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human readable message")
    path: Optional[str] = None
    method: Optional[str] = None
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail
