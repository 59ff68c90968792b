"""
Domain exceptions raised by the engines and services.

The API layer translates these into status-coded responses
(see core.middleware.error_handling).
"""

from typing import Any, Optional


class TalentFlowError(Exception):
    """Base class for domain errors."""

    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TalentFlowError, ValueError):
    """
    Bad input shape or value.

    Examples: empty job title, unrecognised stage, out-of-range reorder target.
    ``errors`` carries a per-field message map when one is available
    (assessment answers).
    """

    code = "INVALID_INPUT"

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        super().__init__(message, details=errors)
        self.errors = errors or {}


class NotFoundError(TalentFlowError):
    """Referenced id is absent."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(TalentFlowError):
    """Uniqueness conflict that could not be resolved automatically."""

    code = "CONFLICT"
