"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from database.store import init_db, close_db
from api.routes import health
from api.routes.v1 import (
    assessments,
    candidates,
    dev,
    jobs,
    notes,
)

from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
    SimulationMiddleware,
    FailureRule,
)

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
    await init_db()

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Hiring board backend: jobs, candidates, pipeline stages and assessments",
    version="0.1.0",
    lifespan=lifespan,
)

setup_error_handlers(app, debug=settings.debug)

# Middleware runs in reverse order of registration: the last one added is
# the outermost.

# 1. Simulation (innermost): latency and random write failures
if settings.simulation_enabled:
    app.add_middleware(
        SimulationMiddleware,
        latency_min_ms=settings.simulated_latency_min_ms,
        latency_max_ms=settings.simulated_latency_max_ms,
        write_failure_rate=settings.simulated_write_failure_rate,
        rules=[
            FailureRule(
                path_suffix="/reorder",
                rate=settings.simulated_reorder_failure_rate,
                methods=["PATCH"],
            ),
        ],
    )

# 2. Structured logging (sees simulated latency and failures)
app.add_middleware(
    StructuredLoggingMiddleware,
    log_request_body=settings.log_request_body,
    log_response_body=settings.log_response_body,
    max_body_size=settings.log_max_body_size,
)

# 3. Error handling (catches anything the exception handlers missed)
app.add_middleware(
    ErrorHandlingMiddleware,
    debug=settings.debug,
)

# 4. CORS (outermost, so error responses carry CORS headers too)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check routes
app.include_router(health.router, tags=["Health"])

# API routes
app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(candidates.router, prefix=settings.api_prefix)
app.include_router(notes.router, prefix=settings.api_prefix)
app.include_router(assessments.router, prefix=settings.api_prefix)

if settings.app_env == "development":
    app.include_router(dev.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
