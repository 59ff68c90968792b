"""
Core middleware package.

This package provides the middleware components of the API:
- Error handling with error envelope and message sanitization
- Structured logging with PII masking
- Network simulation (latency and random write failures)
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    get_logger,
)

from core.middleware.simulation import (
    SimulationMiddleware,
    FailureRule,
    SIMULATED_FAILURE_MESSAGE,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "get_logger",
    # Simulation
    "SimulationMiddleware",
    "FailureRule",
    "SIMULATED_FAILURE_MESSAGE",
]
