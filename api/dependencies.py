"""FastAPI dependencies for dependency injection."""

import random
from typing import Callable, Optional, Sequence

from fastapi import Query

from core.engines.query import JobQuery
from database.store import EntityStore, get_store

__all__ = ["EntityStore", "get_store", "get_job_chooser", "get_job_query"]


def get_job_chooser() -> Callable[[Sequence[int]], int]:
    """
    Picker used when a candidate is created without a job id.

    Overridden in tests to make the choice deterministic.
    """
    return random.choice


def get_job_query(
    search: Optional[str] = Query(None, description="Case-insensitive match on title or slug"),
    status: Optional[str] = Query(None, description="Filter by status (active, archived)"),
    page: Optional[str] = Query(None, description="Page number, 1-indexed"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Items per page"),
    sort: Optional[str] = Query(
        None, description="orderAsc, orderDesc, titleAsc, titleDesc or field:dir"
    ),
) -> JobQuery:
    """
    Get job listing parameters.

    Page values are parsed leniently: ``"3abc"`` is 3, garbage falls back to
    the defaults and everything is clamped to at least 1.
    """
    return JobQuery.from_params(
        search=search, status=status, page=page, page_size=page_size, sort=sort
    )
