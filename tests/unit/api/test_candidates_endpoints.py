"""
Tests for candidate endpoints.

Tests:
- Creating candidates (defaults, validation, job assignment)
- Listing and filtering by stage
- Patching identity fields and stage
- Timeline events produced by stage changes
"""

import pytest

from api.schemas.candidates import CandidateCreate


@pytest.fixture
def job(make_job):
    return make_job("Backend Engineer")


def timeline(client, candidate_id):
    return client.get(f"/candidates/{candidate_id}/timeline").json()["data"]


class TestCandidateSchemas:
    """Test candidate request schemas."""

    def test_email_lowercased_and_stripped(self):
        request = CandidateCreate(name=" Ada ", email=" ADA@Example.com ")
        assert request.name == "Ada"
        assert request.email == "ada@example.com"

    def test_non_string_stage_dropped(self):
        assert CandidateCreate(name="a", email="b", stage=3).stage is None

    def test_camel_case_job_id(self):
        assert CandidateCreate.model_validate({"name": "a", "email": "b", "jobId": 4}).job_id == 4


class TestCreateCandidate:
    """Test POST /candidates."""

    def test_create(self, client, job):
        response = client.post(
            "/candidates",
            json={"name": "Ada Lovelace", "email": "Ada@Example.com", "jobId": job["id"], "stage": "tech"},
        )

        assert response.status_code == 201
        candidate = response.json()
        assert candidate["name"] == "Ada Lovelace"
        assert candidate["email"] == "ada@example.com"
        assert candidate["stage"] == "tech"
        assert candidate["jobId"] == job["id"]
        assert candidate["jobTitle"] == "Backend Engineer"

    def test_invalid_stage_defaults_to_applied(self, make_candidate, job):
        assert make_candidate(job["id"], stage="interview")["stage"] == "applied"

    def test_missing_stage_defaults_to_applied(self, make_candidate, job):
        assert make_candidate(job["id"])["stage"] == "applied"

    @pytest.mark.parametrize("payload", [
        {"name": "", "email": "a@b.c"},
        {"name": "Ada", "email": "  "},
        {"email": "a@b.c"},
    ])
    def test_name_and_email_required(self, client, job, payload):
        response = client.post("/candidates", json={**payload, "jobId": job["id"]})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "name and email are required"

    def test_missing_job_id_picks_existing_job(self, client, job):
        response = client.post("/candidates", json={"name": "Ada", "email": "a@b.c"})

        assert response.status_code == 201
        assert response.json()["jobId"] == job["id"]

    def test_no_jobs_at_all(self, client):
        response = client.post("/candidates", json={"name": "Ada", "email": "a@b.c"})
        assert response.status_code == 400

    def test_unknown_job(self, client, job):
        response = client.post("/candidates", json={"name": "Ada", "email": "a@b.c", "jobId": 999})
        assert response.status_code == 404

    def test_created_event_recorded(self, client, make_candidate, job):
        candidate = make_candidate(job["id"], stage="screen")

        events = timeline(client, candidate["id"])

        assert len(events) == 1
        assert events[0]["fromStage"] == "applied"
        assert events[0]["toStage"] == "screen"
        assert events[0]["note"] == "Created"


class TestListCandidates:
    """Test GET /candidates and GET /candidates/{id}."""

    def test_list_and_filter(self, client, make_candidate, job):
        make_candidate(job["id"], name="A", email="a@x.io")
        make_candidate(job["id"], name="B", email="b@x.io", stage="tech")
        make_candidate(job["id"], name="C", email="c@x.io", stage="tech")

        everyone = client.get("/candidates").json()
        tech = client.get("/candidates", params={"stage": "tech"}).json()

        assert everyone["total"] == 3
        assert [c["name"] for c in tech["data"]] == ["B", "C"]
        assert tech["total"] == 2
        assert all(c["jobTitle"] == "Backend Engineer" for c in everyone["data"])

    def test_get_candidate(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])

        response = client.get(f"/candidates/{candidate['id']}")

        assert response.status_code == 200
        assert response.json()["jobTitle"] == "Backend Engineer"

    def test_get_unknown_candidate(self, client):
        response = client.get("/candidates/404")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Candidate 404 not found"


class TestUpdateCandidate:
    """Test PATCH /candidates/{id}."""

    def test_stage_change_appends_one_event(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])

        response = client.patch(f"/candidates/{candidate['id']}", json={"stage": "screen"})

        assert response.status_code == 200
        assert response.json()["stage"] == "screen"
        events = timeline(client, candidate["id"])
        assert len(events) == 2
        assert events[-1]["fromStage"] == "applied"
        assert events[-1]["toStage"] == "screen"
        assert events[-1]["note"] == "Stage change"

    def test_same_stage_is_noop(self, client, make_candidate, job):
        candidate = make_candidate(job["id"], stage="tech")

        response = client.patch(f"/candidates/{candidate['id']}", json={"stage": "tech"})

        assert response.status_code == 200
        assert len(timeline(client, candidate["id"])) == 1

    def test_stage_change_with_note(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])

        client.patch(f"/candidates/{candidate['id']}", json={"stage": "offer", "note": "Great onsite"})

        assert timeline(client, candidate["id"])[-1]["note"] == "Great onsite"

    def test_unknown_stage_rejected_without_side_effects(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])

        response = client.patch(
            f"/candidates/{candidate['id']}", json={"name": "Renamed", "stage": "interview"}
        )

        assert response.status_code == 400
        after = client.get(f"/candidates/{candidate['id']}").json()
        assert after["stage"] == "applied"
        assert after["name"] == "Ada Lovelace"
        assert len(timeline(client, candidate["id"])) == 1

    def test_identity_edit(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])

        body = client.patch(
            f"/candidates/{candidate['id']}", json={"name": "Grace Hopper", "email": "GRACE@navy.mil"}
        ).json()

        assert body["name"] == "Grace Hopper"
        assert body["email"] == "grace@navy.mil"
        assert len(timeline(client, candidate["id"])) == 1

    def test_empty_name_rejected(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])
        response = client.patch(f"/candidates/{candidate['id']}", json={"name": ""})
        assert response.status_code == 400

    def test_move_to_other_job(self, client, make_job, make_candidate, job):
        other = make_job("Designer")
        candidate = make_candidate(job["id"])

        body = client.patch(f"/candidates/{candidate['id']}", json={"jobId": other["id"]}).json()

        assert body["jobId"] == other["id"]
        assert body["jobTitle"] == "Designer"

    def test_move_to_unknown_job(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])
        response = client.patch(f"/candidates/{candidate['id']}", json={"jobId": 999})
        assert response.status_code == 404

    def test_unknown_candidate(self, client):
        assert client.patch("/candidates/999", json={"stage": "tech"}).status_code == 404

    def test_full_pipeline_timeline(self, client, make_candidate, job):
        candidate = make_candidate(job["id"])
        for stage in ("screen", "tech", "offer", "hired"):
            client.patch(f"/candidates/{candidate['id']}", json={"stage": stage})

        events = timeline(client, candidate["id"])

        assert [e["toStage"] for e in events] == ["applied", "screen", "tech", "offer", "hired"]
        assert all(a["at"] <= b["at"] for a, b in zip(events, events[1:]))

    def test_timeline_of_unknown_candidate(self, client):
        assert client.get("/candidates/999/timeline").status_code == 404
