"""
API Services Layer.

Database operations behind the API endpoints. Each function takes the
EntityStore it works on; business rules come from core.engines.
"""

from api.services.jobs import (
    list_jobs,
    get_job,
    check_slug,
    create_job,
    update_job,
    reorder_job,
)

from api.services.candidates import (
    list_candidates,
    get_candidate,
    pick_job_id,
    create_candidate,
    update_candidate,
    change_stage,
    get_timeline,
)

from api.services.notes import (
    list_notes,
    add_note,
    delete_note,
)

from api.services.assessments import (
    get_assessment,
    save_assessment,
    validate_submission,
    submit_assessment,
    list_submissions,
    assessments_exist,
)

__all__ = [
    # Jobs
    "list_jobs",
    "get_job",
    "check_slug",
    "create_job",
    "update_job",
    "reorder_job",
    # Candidates
    "list_candidates",
    "get_candidate",
    "pick_job_id",
    "create_candidate",
    "update_candidate",
    "change_stage",
    "get_timeline",
    # Notes
    "list_notes",
    "add_note",
    "delete_note",
    # Assessments
    "get_assessment",
    "save_assessment",
    "validate_submission",
    "submit_assessment",
    "list_submissions",
    "assessments_exist",
]
