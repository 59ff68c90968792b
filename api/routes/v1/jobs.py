"""
Job board endpoints.

Provides REST API for listing, creating, editing and reordering jobs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Path, status

from api.dependencies import EntityStore, get_store, get_job_query
from api.schemas.common import PaginatedResponse
from api.schemas.jobs import (
    JobCreateRequest,
    JobUpdateRequest,
    JobResponse,
    JobReorderRequest,
    JobReorderResponse,
    SlugAvailabilityResponse,
)
from api.services import jobs as job_service
from core.engines.query import JobQuery

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get(
    "",
    response_model=PaginatedResponse[JobResponse],
    summary="List Jobs",
    description="Search, filter, sort and paginate the job board.",
)
async def list_jobs(
    query: JobQuery = Depends(get_job_query),
    store: EntityStore = Depends(get_store),
):
    """Retrieve one page of jobs and the filtered total."""
    page = await job_service.list_jobs(store, query)
    return PaginatedResponse[JobResponse](
        data=[JobResponse.model_validate(job) for job in page.data],
        page=page.page,
        page_size=page.page_size,
        total=page.total,
        total_pages=page.total_pages,
    )


@router.get(
    "/slug/{slug}",
    response_model=SlugAvailabilityResponse,
    summary="Check Slug",
    description="Check whether a slug is free, optionally ignoring the job being edited.",
)
async def check_slug(
    slug: str = Path(..., description="Slug to check"),
    exclude_id: Optional[int] = Query(None, alias="excludeId", description="Job ID to ignore"),
    store: EntityStore = Depends(get_store),
):
    return await job_service.check_slug(store, slug, exclude_id)


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get Job",
)
async def get_job(
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve a single job."""
    return await job_service.get_job(store, job_id)


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job",
    description="Create a job at the end of the board. The slug is derived from the title.",
)
async def create_job(
    request: JobCreateRequest,
    store: EntityStore = Depends(get_store),
):
    return await job_service.create_job(store, request.title, request.tags)


@router.patch(
    "/{job_id}",
    response_model=JobResponse,
    summary="Update Job",
    description="Edit title, tags or status. A new title re-derives the slug.",
)
async def update_job(
    request: JobUpdateRequest,
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    return await job_service.update_job(
        store,
        job_id,
        title=request.title,
        tags=request.tags,
        status=request.status,
    )


@router.patch(
    "/{job_id}/reorder",
    response_model=JobReorderResponse,
    summary="Reorder Job",
    description=(
        "Move a job to a new board position. Jobs in between shift by one; "
        "the whole move is applied atomically."
    ),
)
async def reorder_job(
    request: JobReorderRequest,
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    await job_service.reorder_job(store, job_id, request.from_order, request.to_order)
    return JobReorderResponse(from_order=request.from_order, to_order=request.to_order)
