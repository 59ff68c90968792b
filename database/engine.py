from logging import getLogger

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from core.config import settings

logger = getLogger(__name__)


# Base class for declarative models
class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the entity store.

    In-memory SQLite databases share a single connection so every session
    sees the same data.
    """
    url = make_url(database_url)
    options: dict = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool

    engine = create_async_engine(url, **options)

    if url.get_backend_name() == "sqlite":
        # SQLite ignores foreign keys unless asked per connection
        @event.listens_for(engine.sync_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.info(f"Entity store bound to {url.render_as_string(hide_password=True)}")
    return engine


db_engine = create_db_engine(settings.database_url, echo=settings.database_echo)
