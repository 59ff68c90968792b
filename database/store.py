"""
Entity store.

Owns the session factory for the persistent collections (jobs, candidates,
timelines, assessments, submissions, notes) and serialises writers per
collection. Services receive an ``EntityStore`` through dependency
injection, so tests can hand them one bound to an in-memory database.
"""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from database.engine import Base, create_db_engine, db_engine
from database.models.assessments import Assessment, Submission
from database.models.candidates import Candidate, TimelineEvent
from database.models.jobs import Job
from database.models.notes import Note

logger = logging.getLogger(__name__)

JOBS = "jobs"
CANDIDATES = "candidates"
TIMELINES = "timelines"
ASSESSMENTS = "assessments"
SUBMISSIONS = "submissions"
NOTES = "notes"

COLLECTIONS: tuple[str, ...] = (JOBS, CANDIDATES, TIMELINES, ASSESSMENTS, SUBMISSIONS, NOTES)

# Children first so foreign keys hold while clearing
_CLEAR_ORDER = (Note, TimelineEvent, Submission, Candidate, Assessment, Job)


class EntityStore:
    """
    Persistent keyed collections behind an async SQLAlchemy engine.

    Reads use :meth:`session`. Writes use :meth:`transaction`, which takes
    the named collection locks (always in sorted order, so two writers can
    never deadlock) and commits or rolls back as one unit.

    On a single-connection engine (in-memory SQLite) every session shares one
    DBAPI connection, so reads and writes additionally hold a store-wide
    connection lock, taken after any collection locks.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        self._locks = {name: asyncio.Lock() for name in COLLECTIONS}
        self._connection_lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if isinstance(engine.sync_engine.pool, StaticPool) else None
        )

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "EntityStore":
        return cls(create_db_engine(database_url, echo=echo))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Session for reads."""
        async with AsyncExitStack() as stack:
            if self._connection_lock is not None:
                await stack.enter_async_context(self._connection_lock)
            session = await stack.enter_async_context(self.session_factory())
            yield session

    @asynccontextmanager
    async def transaction(self, *collections: str) -> AsyncIterator[AsyncSession]:
        """
        Atomic write over ``collections``.

        Args:
            collections: Names from ``COLLECTIONS`` the caller will mutate

        Yields:
            Session inside an open transaction; any exception rolls it back
        """
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise KeyError(f"Unknown collections: {', '.join(sorted(unknown))}")

        async with AsyncExitStack() as stack:
            for name in sorted(set(collections)):
                await stack.enter_async_context(self._locks[name])
            if self._connection_lock is not None:
                await stack.enter_async_context(self._connection_lock)
            async with self.session_factory() as session:
                async with session.begin():
                    yield session

    async def create_all(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def clear(self) -> None:
        """Delete every row in every collection."""
        async with self.transaction(*COLLECTIONS) as session:
            for model in _CLEAR_ORDER:
                await session.execute(delete(model))
        logger.warning("Entity store cleared")

    async def dispose(self) -> None:
        """Close database engine and connections."""
        await self.engine.dispose()


_store: Optional[EntityStore] = None


def get_store() -> EntityStore:
    """FastAPI dependency returning the application's store."""
    global _store
    if _store is None:
        _store = EntityStore(db_engine)
    return _store


async def init_db() -> None:
    """Create tables for the configured database."""
    logger.info(f"Initialising entity store ({settings.app_env})")
    await get_store().create_all()


async def close_db() -> None:
    """Close database engine and connections."""
    await get_store().dispose()
