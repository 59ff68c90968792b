"""Job service functions."""

from typing import Any, Dict, Iterable, Optional
import logging

from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.engines.query import JobQuery, Page, query_jobs
from core.engines.reorder import ReorderPlan, plan_reorder
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.utils.formatting import slugify, suffix_slug
from database.models.jobs import Job, JobStatus, JOB_STATUSES
from database.store import EntityStore, JOBS

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "job"


async def list_jobs(store: EntityStore, query: JobQuery) -> Page[Job]:
    """List jobs filtered, sorted and paginated by ``query``."""
    async with store.session() as session:
        result = await session.execute(select(Job).order_by(Job.id))
        jobs = result.scalars().all()
    return query_jobs(jobs, query)


async def get_job(store: EntityStore, job_id: int) -> Job:
    """Get a job by id."""
    async with store.session() as session:
        job = await session.get(Job, job_id)
    if not job:
        raise NotFoundError("Job", job_id)
    return job


async def check_slug(store: EntityStore, slug: str, exclude_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Check whether a slug is free.

    Args:
        slug: Slug to check (case-insensitive)
        exclude_id: Job allowed to hold the slug already (the one being edited)

    Returns:
        Dictionary with ``available`` and the id of the conflicting job, if any
    """
    async with store.session() as session:
        result = await session.execute(
            select(Job.id).where(Job.slug == slug.lower()).order_by(Job.id)
        )
        conflict_id = next((jid for jid in result.scalars() if jid != exclude_id), None)
    return {"available": conflict_id is None, "conflict_id": conflict_id}


async def _resolve_slug(session: AsyncSession, title: str, exclude_id: Optional[int] = None) -> str:
    """Derive a slug from ``title``, suffixing ``-2``, ``-3``... until it is unused."""
    base = slugify(title) or FALLBACK_SLUG
    result = await session.execute(
        select(Job.id, Job.slug).where(Job.slug.like(f"{base[:40]}%"))
    )
    taken = {slug for jid, slug in result.all() if jid != exclude_id}

    candidate, attempt = base, 0
    while candidate in taken:
        attempt += 1
        candidate = suffix_slug(base, attempt)
    return candidate


async def _flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except IntegrityError as exc:
        raise ConflictError("Slug already in use") from exc


async def create_job(store: EntityStore, title: str, tags: Optional[Iterable[str]] = None) -> Job:
    """
    Create a job at the end of the board.

    Args:
        title: Job title (stripped, must be non-empty)
        tags: Optional tags

    Returns:
        The created job with its slug and order
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    async with store.transaction(JOBS) as session:
        count = await session.scalar(select(func.count()).select_from(Job)) or 0
        job = Job(
            title=title,
            slug=await _resolve_slug(session, title),
            status=JobStatus.ACTIVE.value,
            tags=[str(tag) for tag in tags or []],
            order=count,
        )
        session.add(job)
        await _flush(session)

    logger.info(f"Created job {job.id} ({job.slug}) at order {job.order}")
    return job


async def update_job(
    store: EntityStore,
    job_id: int,
    title: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    status: Optional[str] = None,
) -> Job:
    """
    Patch a job's title, tags or status.

    A new title re-derives the slug. Statuses other than active/archived are
    ignored.
    """
    async with store.transaction(JOBS) as session:
        job = await session.get(Job, job_id)
        if not job:
            raise NotFoundError("Job", job_id)

        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("Title cannot be empty")
            job.title = title
            job.slug = await _resolve_slug(session, title, exclude_id=job_id)

        if tags is not None:
            job.tags = [str(tag) for tag in tags]

        if status in JOB_STATUSES:
            job.status = status

        await _flush(session)

    logger.info(f"Updated job {job_id}")
    return job


async def _apply_order_changes(session: AsyncSession, changes: Dict[int, int]) -> None:
    """Write new orders. The moved job is written last."""
    for job_id, order in changes.items():
        await session.execute(
            update(Job).where(Job.id == job_id).values(order=order)
        )


async def reorder_job(store: EntityStore, job_id: int, from_order: int, to_order: int) -> ReorderPlan:
    """
    Move a job to ``to_order`` and renumber the jobs in between.

    Runs under the jobs lock in a single transaction: either every shifted
    order and the move are stored, or nothing is.

    Args:
        job_id: Job to move
        from_order: Position the client believes the job is at
        to_order: Target position

    Returns:
        The applied plan
    """
    async with store.transaction(JOBS) as session:
        result = await session.execute(select(Job.id, Job.order))
        orders = {jid: order for jid, order in result.all()}

        try:
            plan = plan_reorder(orders, job_id, from_order, to_order)
        except ValidationError:
            logger.warning(
                f"Rejected reorder of job {job_id}: toOrder {to_order} outside 0..{len(orders) - 1}"
            )
            raise

        if not plan.is_noop:
            await _apply_order_changes(session, plan.changes)

    if not plan.is_noop:
        logger.info(
            f"Reordered job {job_id} from {plan.from_order} to {plan.to_order} "
            f"({len(plan.changes)} rows renumbered)"
        )
    return plan
