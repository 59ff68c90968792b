"""Candidate service functions."""

from typing import Any, Callable, Dict, List, Optional, Sequence
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.engines.query import filter_candidates, job_title_for
from core.engines.stages import (
    StageTransition,
    coerce_stage,
    initial_transition,
    plan_stage_change,
)
from core.exceptions import NotFoundError, ValidationError
from core.utils.datetime import now
from database.models.candidates import Candidate, TimelineEvent
from database.models.jobs import Job
from database.store import EntityStore, CANDIDATES, TIMELINES

logger = logging.getLogger(__name__)


def _serialize(candidate: Candidate, job_title: str) -> Dict[str, Any]:
    return {
        "id": candidate.id,
        "name": candidate.name,
        "email": candidate.email,
        "job_id": candidate.job_id,
        "stage": candidate.stage,
        "job_title": job_title,
        "created_at": candidate.created_at,
        "updated_at": candidate.updated_at,
    }


async def _job_titles(session: AsyncSession) -> Dict[int, str]:
    result = await session.execute(select(Job.id, Job.title))
    return {jid: title for jid, title in result.all()}


async def _require_job(session: AsyncSession, job_id: int) -> None:
    if await session.get(Job, job_id) is None:
        raise NotFoundError("Job", job_id)


def _record(session: AsyncSession, transition: StageTransition) -> TimelineEvent:
    event = TimelineEvent(
        candidate_id=transition.candidate_id,
        at=transition.at,
        from_stage=transition.from_stage,
        to_stage=transition.to_stage,
        note=transition.note,
    )
    session.add(event)
    return event


async def list_candidates(store: EntityStore, stage: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    List candidates with their job title, optionally filtered by stage.

    Args:
        stage: Keep only candidates in this stage (empty keeps everyone)

    Returns:
        Candidates in id order, each with ``job_title``
    """
    async with store.session() as session:
        result = await session.execute(select(Candidate).order_by(Candidate.id))
        candidates = filter_candidates(result.scalars().all(), stage)
        titles = await _job_titles(session)

    return [_serialize(c, job_title_for(titles, c.job_id)) for c in candidates]


async def get_candidate(store: EntityStore, candidate_id: int) -> Dict[str, Any]:
    """Get one candidate with its job title."""
    async with store.session() as session:
        candidate = await session.get(Candidate, candidate_id)
        if not candidate:
            raise NotFoundError("Candidate", candidate_id)
        titles = await _job_titles(session)
    return _serialize(candidate, job_title_for(titles, candidate.job_id))


async def pick_job_id(store: EntityStore, choose: Callable[[Sequence[int]], int]) -> Optional[int]:
    """Pick an existing job id with ``choose``; None when there are no jobs."""
    async with store.session() as session:
        result = await session.execute(select(Job.id).order_by(Job.id))
        job_ids = list(result.scalars())
    return choose(job_ids) if job_ids else None


async def create_candidate(
    store: EntityStore,
    name: str,
    email: str,
    job_id: Optional[int],
    stage: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a candidate and its first timeline entry.

    Args:
        name: Full name (required)
        email: Email (required, stored lowercased)
        job_id: Existing job id
        stage: Initial stage; unknown values fall back to ``applied``

    Returns:
        The created candidate with its job title
    """
    name = (name or "").strip()
    email = (email or "").strip().lower()
    if not name or not email:
        raise ValidationError("name and email are required")
    if job_id is None:
        raise ValidationError("jobId is required")

    stage = coerce_stage(stage)

    async with store.transaction(CANDIDATES, TIMELINES) as session:
        await _require_job(session, job_id)

        candidate = Candidate(name=name, email=email, job_id=job_id, stage=stage)
        session.add(candidate)
        await session.flush()

        _record(session, initial_transition(candidate.id, stage, now()))
        titles = await _job_titles(session)

    logger.info(f"Created candidate {candidate.id} for job {job_id} in stage {stage}")
    return _serialize(candidate, job_title_for(titles, job_id))


async def _apply_stage_change(
    session: AsyncSession,
    candidate: Candidate,
    new_stage: str,
    note: Optional[str] = None,
) -> Optional[StageTransition]:
    """Move ``candidate`` and append the timeline event, or do nothing."""
    transition = plan_stage_change(candidate.id, candidate.stage, new_stage, now(), note)
    if transition is None:
        return None

    _record(session, transition)
    candidate.stage = transition.to_stage
    await session.flush()

    logger.info(
        f"Candidate {candidate.id} moved {transition.from_stage} -> {transition.to_stage}"
    )
    return transition


async def change_stage(
    store: EntityStore,
    candidate_id: int,
    new_stage: str,
    note: Optional[str] = None,
) -> Optional[StageTransition]:
    """
    Move a candidate to ``new_stage``.

    The stage update and its timeline event are written in one transaction
    under the candidates and timelines locks. Moving a candidate to the stage
    it is already in changes nothing.

    Returns:
        The applied transition, or None for a no-op
    """
    async with store.transaction(CANDIDATES, TIMELINES) as session:
        candidate = await session.get(Candidate, candidate_id)
        if not candidate:
            raise NotFoundError("Candidate", candidate_id)
        return await _apply_stage_change(session, candidate, new_stage, note)


async def update_candidate(
    store: EntityStore,
    candidate_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    job_id: Optional[int] = None,
    stage: Optional[str] = None,
    note: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Patch a candidate. Omitted fields are left untouched.

    A stage different from the stored one appends a timeline event in the
    same transaction as the rest of the patch.
    """
    async with store.transaction(CANDIDATES, TIMELINES) as session:
        candidate = await session.get(Candidate, candidate_id)
        if not candidate:
            raise NotFoundError("Candidate", candidate_id)

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Name cannot be empty")
            candidate.name = name

        if email is not None:
            email = email.strip().lower()
            if not email:
                raise ValidationError("Email cannot be empty")
            candidate.email = email

        if job_id is not None and job_id != candidate.job_id:
            await _require_job(session, job_id)
            candidate.job_id = job_id

        if stage is not None:
            await _apply_stage_change(session, candidate, stage, note)

        await session.flush()
        titles = await _job_titles(session)

    return _serialize(candidate, job_title_for(titles, candidate.job_id))


async def get_timeline(store: EntityStore, candidate_id: int) -> List[TimelineEvent]:
    """Timeline events for a candidate, oldest first."""
    async with store.session() as session:
        if await session.get(Candidate, candidate_id) is None:
            raise NotFoundError("Candidate", candidate_id)
        result = await session.execute(
            select(TimelineEvent)
            .where(TimelineEvent.candidate_id == candidate_id)
            .order_by(TimelineEvent.at, TimelineEvent.id)
        )
        return list(result.scalars().all())
