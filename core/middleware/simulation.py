"""
Network simulation middleware.

Delays every request by a random latency and fails a share of write requests
with a 500, so clients exercise their loading, optimistic-update and rollback
paths against the mock backend. Nothing behind this middleware is aware of it.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")

SIMULATED_FAILURE_CODE = "SIMULATED_FAILURE"
SIMULATED_FAILURE_MESSAGE = "Random write failure (simulated)"

DEFAULT_EXEMPT_PATHS = ("/health", "/ready", "/docs", "/redoc", "/openapi.json")


@dataclass
class FailureRule:
    """Failure rate for write requests whose path ends with ``path_suffix``."""
    path_suffix: str
    rate: float
    methods: List[str] = field(default_factory=lambda: list(WRITE_METHODS))

    def matches(self, method: str, path: str) -> bool:
        return method in self.methods and path.rstrip("/").endswith(self.path_suffix)


class SimulationMiddleware(BaseHTTPMiddleware):
    """
    Latency and failure injection.

    Features:
    - Uniform random latency in ``[latency_min_ms, latency_max_ms]`` on every request
    - Random 500s on write methods only, at ``write_failure_rate``
    - Per-path-suffix failure rates (first matching rule wins)
    - Exempt paths (health checks, docs) pass straight through
    """

    def __init__(
        self,
        app: ASGIApp,
        latency_min_ms: int = 200,
        latency_max_ms: int = 1200,
        write_failure_rate: float = 0.08,
        rules: Optional[List[FailureRule]] = None,
        exempt_paths: Sequence[str] = DEFAULT_EXEMPT_PATHS,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize simulation middleware.

        Args:
            app: The ASGI application
            latency_min_ms: Lower latency bound
            latency_max_ms: Upper latency bound
            write_failure_rate: Failure probability for writes without a matching rule
            rules: Path-specific failure rates
            exempt_paths: Path prefixes that are never delayed or failed
            rng: Random source (seed it for reproducible runs)
            sleep: Coroutine used to wait out the latency
        """
        super().__init__(app)
        self.latency_min_ms = max(0, latency_min_ms)
        self.latency_max_ms = max(self.latency_min_ms, latency_max_ms)
        self.write_failure_rate = write_failure_rate
        self.rules = rules or []
        self.exempt_paths = tuple(exempt_paths)
        self.rng = rng or random.Random()
        self.sleep = sleep

    def is_exempt(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.exempt_paths)

    def failure_rate(self, method: str, path: str) -> float:
        """Failure probability for a request (0 for reads)."""
        if method not in WRITE_METHODS:
            return 0.0
        for rule in self.rules:
            if rule.matches(method, path):
                return rule.rate
        return self.write_failure_rate

    def latency_seconds(self) -> float:
        return self.rng.uniform(self.latency_min_ms, self.latency_max_ms) / 1000

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if self.is_exempt(path):
            return await call_next(request)

        latency = self.latency_seconds()
        if latency > 0:
            await self.sleep(latency)

        rate = self.failure_rate(request.method, path)
        if rate > 0 and self.rng.random() < rate:
            logger.warning(f"Simulated failure: {request.method} {path}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": {
                        "code": SIMULATED_FAILURE_CODE,
                        "message": SIMULATED_FAILURE_MESSAGE,
                        "path": path,
                        "method": request.method,
                    }
                },
            )

        return await call_next(request)
