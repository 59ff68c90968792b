"""
Job order renumbering.

Job orders form a dense permutation of ``0..N-1``. Moving one job shifts
every job between its old and new position by one so the permutation stays
dense. The functions here only compute the new orders; the caller persists
them atomically.
"""

from dataclasses import dataclass, field
from typing import Mapping

from core.exceptions import ConflictError, NotFoundError, ValidationError


@dataclass(frozen=True)
class ReorderPlan:
    """New orders for every job touched by a move."""

    job_id: int
    from_order: int
    to_order: int
    changes: dict[int, int] = field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return not self.changes


def is_dense(orders: Mapping[int, int]) -> bool:
    """True if the order values are exactly ``{0, ..., len(orders) - 1}``."""
    return sorted(orders.values()) == list(range(len(orders)))


def plan_reorder(
    orders: Mapping[int, int],
    job_id: int,
    from_order: int,
    to_order: int,
) -> ReorderPlan:
    """
    Compute the renumbering for moving ``job_id`` to ``to_order``.

    ``from_order`` is the position the caller believes the job is at. It only
    short-circuits the no-op case; the stored order in ``orders`` is what the
    shift is computed from, so a stale client view cannot corrupt the
    permutation.

    Args:
        orders: Current ``job_id -> order`` for all jobs
        job_id: Job being moved
        from_order: Caller's view of the job's current order
        to_order: Target order

    Returns:
        ReorderPlan whose ``changes`` map job ids to their new order
        (the moved job included)

    Raises:
        NotFoundError: ``job_id`` is not in ``orders``
        ValidationError: ``to_order`` is outside ``[0, len(orders) - 1]``
        ConflictError: the result would not be a dense permutation
    """
    if job_id not in orders:
        raise NotFoundError("Job", job_id)

    if from_order == to_order:
        return ReorderPlan(job_id=job_id, from_order=from_order, to_order=to_order)

    max_order = len(orders) - 1
    if to_order < 0 or to_order > max_order:
        raise ValidationError("toOrder out of range")

    real_from = orders[job_id]
    changes: dict[int, int] = {}

    if to_order > real_from:
        for other_id, order in orders.items():
            if real_from < order <= to_order and other_id != job_id:
                changes[other_id] = order - 1
    elif to_order < real_from:
        for other_id, order in orders.items():
            if to_order <= order < real_from and other_id != job_id:
                changes[other_id] = order + 1

    if to_order != real_from:
        changes[job_id] = to_order

    result = {**orders, **changes}
    if not is_dense(result):
        raise ConflictError("Job orders are not contiguous; reorder rejected")

    return ReorderPlan(
        job_id=job_id,
        from_order=real_from,
        to_order=to_order,
        changes=changes,
    )
