"""
Candidate management endpoints.

Provides REST API for listing, creating and editing candidates, moving them
between pipeline stages and reading their stage timeline.
"""

from typing import Callable, Optional, Sequence

from fastapi import APIRouter, Depends, Query, Path, status

from api.dependencies import EntityStore, get_store, get_job_chooser
from api.schemas.candidates import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    TimelineEventResponse,
)
from api.schemas.common import ListResponse
from api.services import candidates as candidate_service

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.get(
    "",
    response_model=CandidateListResponse,
    summary="List Candidates",
    description="List candidates with their job title, optionally filtered by stage.",
)
async def list_candidates(
    stage: Optional[str] = Query(None, description="Filter by pipeline stage"),
    store: EntityStore = Depends(get_store),
):
    candidates = await candidate_service.list_candidates(store, stage)
    return CandidateListResponse(
        data=[CandidateResponse.model_validate(c) for c in candidates],
        total=len(candidates),
    )


@router.post(
    "",
    response_model=CandidateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Candidate",
    description=(
        "Create a candidate. Unknown stages fall back to applied; without a "
        "jobId the candidate is attached to an existing job."
    ),
)
async def create_candidate(
    request: CandidateCreate,
    store: EntityStore = Depends(get_store),
    choose_job: Callable[[Sequence[int]], int] = Depends(get_job_chooser),
):
    job_id = request.job_id
    if job_id is None:
        job_id = await candidate_service.pick_job_id(store, choose_job)

    return await candidate_service.create_candidate(
        store,
        name=request.name,
        email=request.email,
        job_id=job_id,
        stage=request.stage,
    )


@router.get(
    "/{candidate_id}",
    response_model=CandidateResponse,
    summary="Get Candidate",
)
async def get_candidate(
    candidate_id: int = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    """Retrieve a candidate with the title of their job."""
    return await candidate_service.get_candidate(store, candidate_id)


@router.patch(
    "/{candidate_id}",
    response_model=CandidateResponse,
    summary="Update Candidate",
    description=(
        "Edit a candidate. Changing the stage appends a timeline event in the "
        "same transaction; an unknown stage is rejected."
    ),
)
async def update_candidate(
    request: CandidateUpdate,
    candidate_id: int = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    return await candidate_service.update_candidate(
        store,
        candidate_id,
        name=request.name,
        email=request.email,
        job_id=request.job_id,
        stage=request.stage,
        note=request.note,
    )


@router.get(
    "/{candidate_id}/timeline",
    response_model=ListResponse[TimelineEventResponse],
    summary="Get Candidate Timeline",
    description="Stage changes of a candidate, oldest first.",
)
async def get_timeline(
    candidate_id: int = Path(..., description="Candidate ID"),
    store: EntityStore = Depends(get_store),
):
    events = await candidate_service.get_timeline(store, candidate_id)
    return ListResponse[TimelineEventResponse](
        data=[TimelineEventResponse.model_validate(e) for e in events]
    )
