"""
Pipeline engines.

Pure, storage-agnostic business rules used by the API services:
- Query engine: job/candidate filtering, sorting, pagination
- Reorder engine: dense job order renumbering
- Stage engine: candidate stage transitions and timeline events
- Assessment engine: conditional visibility and answer validation
"""

from core.engines.query import (
    JobQuery,
    Page,
    query_jobs,
    filter_candidates,
    job_title_for,
    parse_sort,
)

from core.engines.reorder import (
    ReorderPlan,
    plan_reorder,
    is_dense,
)

from core.engines.stages import (
    Stage,
    STAGES,
    StageTransition,
    plan_stage_change,
    initial_transition,
    coerce_stage,
)

from core.engines.assessments import (
    QUESTION_TYPES,
    normalize_section,
    validate_answers,
    is_visible,
)

__all__ = [
    # Query
    "JobQuery",
    "Page",
    "query_jobs",
    "filter_candidates",
    "job_title_for",
    "parse_sort",
    # Reorder
    "ReorderPlan",
    "plan_reorder",
    "is_dense",
    # Stages
    "Stage",
    "STAGES",
    "StageTransition",
    "plan_stage_change",
    "initial_transition",
    "coerce_stage",
    # Assessments
    "QUESTION_TYPES",
    "normalize_section",
    "validate_answers",
    "is_visible",
]
