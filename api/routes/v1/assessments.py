"""
Assessment endpoints.

Provides REST API for building a job's assessment, validating and submitting
answers, and reading submissions.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Path, Response, status

from api.dependencies import EntityStore, get_store
from api.schemas.assessments import (
    AssessmentSave,
    AssessmentResponse,
    AnswersRequest,
    ValidationResult,
    SubmissionCreate,
    SubmissionCreated,
    SubmissionResponse,
    AssessmentExistsResponse,
)
from api.schemas.common import ListResponse
from api.services import assessments as assessment_service

router = APIRouter(prefix="/assessments", tags=["assessments"])


def parse_job_ids(raw: Optional[str]) -> list[int]:
    """Parse a comma-separated id list, dropping blanks, zeros and garbage."""
    job_ids = []
    for part in (raw or "").split(","):
        part = part.strip()
        if part.lstrip("+-").isdigit() and int(part):
            job_ids.append(int(part))
    return job_ids


# Declared before /{job_id} so "exists" is not parsed as a job id
@router.get(
    "/exists",
    response_model=AssessmentExistsResponse,
    summary="Check Assessments Exist",
    description="For each job id, whether it has an assessment with at least one section.",
)
async def assessments_exist(
    job_ids: Optional[str] = Query(None, alias="jobIds", description="Comma-separated job IDs"),
    store: EntityStore = Depends(get_store),
):
    exists = await assessment_service.assessments_exist(store, parse_job_ids(job_ids))
    return AssessmentExistsResponse(exists={str(jid): flag for jid, flag in exists.items()})


@router.get(
    "/{job_id}",
    response_model=AssessmentResponse,
    summary="Get Assessment",
    description="The job's assessment, or an empty version-1 skeleton when none is stored.",
)
async def get_assessment(
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    return await assessment_service.get_assessment(store, job_id)


@router.put(
    "/{job_id}",
    response_model=AssessmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Save Assessment",
    description="Replace the job's assessment. Answers 201 when it did not exist yet.",
)
async def save_assessment(
    request: AssessmentSave,
    response: Response,
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    assessment, created = await assessment_service.save_assessment(
        store,
        job_id,
        [section.model_dump(by_alias=True) for section in request.sections],
        request.version,
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return assessment


@router.post(
    "/{job_id}/validate",
    response_model=ValidationResult,
    summary="Validate Answers",
    description="Check answers against the stored assessment without saving them.",
)
async def validate_answers(
    request: AnswersRequest,
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    errors = await assessment_service.validate_submission(store, job_id, request.answers)
    return ValidationResult(valid=not errors, errors=errors)


@router.post(
    "/{job_id}/submit",
    response_model=SubmissionCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Assessment",
    description="Store a candidate's answers. Invalid answers are rejected with per-question errors.",
)
async def submit_assessment(
    request: SubmissionCreate,
    job_id: int = Path(..., description="Job ID"),
    store: EntityStore = Depends(get_store),
):
    return await assessment_service.submit_assessment(
        store, job_id, request.candidate_id, request.answers
    )


@router.get(
    "/{job_id}/submissions",
    response_model=ListResponse[SubmissionResponse],
    summary="List Submissions",
    description="Submissions for a job, newest first.",
)
async def list_submissions(
    job_id: int = Path(..., description="Job ID"),
    candidate_id: Optional[int] = Query(None, alias="candidateId", description="Only this candidate"),
    store: EntityStore = Depends(get_store),
):
    submissions = await assessment_service.list_submissions(store, job_id, candidate_id)
    return ListResponse[SubmissionResponse](
        data=[SubmissionResponse.model_validate(s) for s in submissions]
    )
