"""
Candidate stage transitions.

Plans stage changes and the timeline events that must accompany them.
Applying a plan (updating the candidate row and appending the event in one
transaction) is the job of api.services.candidates.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from core.exceptions import ValidationError


class Stage(str, PyEnum):
    """Hiring pipeline stage, in board order."""

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


STAGES: tuple[str, ...] = tuple(stage.value for stage in Stage)

DEFAULT_STAGE = Stage.APPLIED.value

CREATED_NOTE = "Created"
STAGE_CHANGE_NOTE = "Stage change"


@dataclass(frozen=True)
class StageTransition:
    """A stage change together with the timeline event it produces."""

    candidate_id: int
    from_stage: str
    to_stage: str
    at: datetime
    note: str = STAGE_CHANGE_NOTE


def is_stage(value: object) -> bool:
    """Return True if ``value`` names one of the pipeline stages."""
    return isinstance(value, str) and value in STAGES


def coerce_stage(value: object, default: str = DEFAULT_STAGE) -> str:
    """Return ``value`` if it is a known stage, otherwise ``default``."""
    return value if is_stage(value) else default


def plan_stage_change(
    candidate_id: int,
    current_stage: str,
    new_stage: str,
    at: datetime,
    note: Optional[str] = None,
) -> Optional[StageTransition]:
    """
    Plan moving a candidate to ``new_stage``.

    Args:
        candidate_id: Candidate being moved
        current_stage: Stage currently stored for the candidate
        new_stage: Requested stage
        at: Timestamp for the timeline event
        note: Optional note for the timeline event

    Returns:
        The transition to apply, or None when the candidate is already in
        ``new_stage``

    Raises:
        ValidationError: ``new_stage`` is not a recognised stage
    """
    if not is_stage(new_stage):
        raise ValidationError(
            f"Unknown stage '{new_stage}'. Expected one of: {', '.join(STAGES)}"
        )

    if new_stage == current_stage:
        return None

    return StageTransition(
        candidate_id=candidate_id,
        from_stage=current_stage,
        to_stage=new_stage,
        at=at,
        note=note or STAGE_CHANGE_NOTE,
    )


def initial_transition(candidate_id: int, stage: str, at: datetime) -> StageTransition:
    """Timeline entry recorded when a candidate is created."""
    return StageTransition(
        candidate_id=candidate_id,
        from_stage=DEFAULT_STAGE,
        to_stage=stage,
        at=at,
        note=CREATED_NOTE,
    )
