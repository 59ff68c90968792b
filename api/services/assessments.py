"""Assessment service functions."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.engines.assessments import normalize_section, question_count, validate_answers
from core.exceptions import NotFoundError, ValidationError
from core.utils.datetime import now
from database.models.assessments import Assessment, Submission
from database.models.candidates import Candidate
from database.models.jobs import Job
from database.store import EntityStore, ASSESSMENTS, SUBMISSIONS

logger = logging.getLogger(__name__)

INVALID_SUBMISSION_MESSAGE = "Submission has invalid answers"


def _serialize(assessment: Assessment) -> Dict[str, Any]:
    return {
        "job_id": assessment.job_id,
        "version": assessment.version,
        "updated_at": assessment.updated_at,
        "sections": assessment.sections or [],
    }


def _skeleton(job_id: int) -> Dict[str, Any]:
    return {"job_id": job_id, "version": 1, "updated_at": now(), "sections": []}


async def _require_job(session: AsyncSession, job_id: int) -> None:
    if await session.get(Job, job_id) is None:
        raise NotFoundError("Job", job_id)


async def get_assessment(store: EntityStore, job_id: int) -> Dict[str, Any]:
    """Stored assessment for a job, or an empty version-1 skeleton."""
    async with store.session() as session:
        assessment = await session.get(Assessment, job_id)
    return _serialize(assessment) if assessment else _skeleton(job_id)


async def save_assessment(
    store: EntityStore,
    job_id: int,
    sections: Sequence[Mapping[str, Any]],
    version: Optional[int] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Replace a job's assessment wholesale.

    Args:
        job_id: Job the assessment belongs to
        sections: Sections with their questions; legacy shapes are normalised
        version: Builder version (defaults to 1)

    Returns:
        Tuple of the stored assessment and whether it was created
    """
    canonical = [normalize_section(section) for section in sections or []]

    async with store.transaction(ASSESSMENTS) as session:
        await _require_job(session, job_id)

        assessment = await session.get(Assessment, job_id)
        created = assessment is None
        if created:
            assessment = Assessment(job_id=job_id)
            session.add(assessment)

        assessment.sections = canonical
        assessment.version = version or 1
        assessment.updated_at = now()
        await session.flush()

    logger.info(
        f"{'Created' if created else 'Replaced'} assessment for job {job_id} "
        f"({len(canonical)} sections, {question_count(canonical)} questions)"
    )
    return _serialize(assessment), created


async def validate_submission(
    store: EntityStore,
    job_id: int,
    answers: Mapping[str, Any],
) -> Dict[str, str]:
    """
    Validate answers against the job's stored assessment.

    Returns:
        ``questionId -> message``; empty when valid or when the job has no
        assessment
    """
    assessment = await get_assessment(store, job_id)
    return validate_answers(assessment["sections"], answers)


async def submit_assessment(
    store: EntityStore,
    job_id: int,
    candidate_id: Optional[int],
    answers: Mapping[str, Any],
    validate: Optional[bool] = None,
) -> Submission:
    """
    Store a candidate's answers.

    When validation is on (``ASSESSMENT_VALIDATE_ON_SUBMIT`` unless
    ``validate`` says otherwise) and the job's assessment has questions,
    invalid answers are rejected with the per-question error map.

    Returns:
        The stored submission
    """
    if validate is None:
        validate = settings.assessment_validate_on_submit

    async with store.transaction(SUBMISSIONS) as session:
        await _require_job(session, job_id)
        if candidate_id is not None and await session.get(Candidate, candidate_id) is None:
            raise NotFoundError("Candidate", candidate_id)

        assessment = await session.get(Assessment, job_id)
        if validate and assessment and question_count(assessment.sections):
            errors = validate_answers(assessment.sections, answers)
            if errors:
                logger.warning(
                    f"Rejected submission for job {job_id}: {len(errors)} invalid answers"
                )
                raise ValidationError(INVALID_SUBMISSION_MESSAGE, errors=errors)

        submission = Submission(job_id=job_id, candidate_id=candidate_id, answers=dict(answers))
        session.add(submission)
        await session.flush()

    logger.info(f"Stored submission {submission.id} for job {job_id}")
    return submission


async def list_submissions(
    store: EntityStore,
    job_id: int,
    candidate_id: Optional[int] = None,
) -> List[Submission]:
    """Submissions for a job, newest first, optionally for one candidate."""
    stmt = select(Submission).where(Submission.job_id == job_id)
    if candidate_id is not None:
        stmt = stmt.where(Submission.candidate_id == candidate_id)
    stmt = stmt.order_by(Submission.created_at.desc(), Submission.id.desc())

    async with store.session() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def assessments_exist(store: EntityStore, job_ids: Iterable[int]) -> Dict[int, bool]:
    """``jobId -> True`` when the job has an assessment with at least one section."""
    job_ids = list(dict.fromkeys(job_ids))
    if not job_ids:
        return {}

    async with store.session() as session:
        result = await session.execute(
            select(Assessment.job_id, Assessment.sections).where(Assessment.job_id.in_(job_ids))
        )
        with_sections = {jid for jid, sections in result.all() if sections}

    return {jid: jid in with_sections for jid in job_ids}
