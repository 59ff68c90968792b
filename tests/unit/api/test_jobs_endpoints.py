"""
Tests for job board endpoints.

Tests:
- Creating jobs (slug, order, validation)
- Listing with search, filter, sort and pagination
- Patching title, tags and status
- Slug availability
- Reordering and its failure modes
"""

import pytest

from api.schemas.jobs import JobCreateRequest, JobUpdateRequest


def board_orders(client):
    response = client.get("/jobs", params={"pageSize": 100})
    return {job["id"]: job["order"] for job in response.json()["data"]}


@pytest.fixture
def six_jobs(make_job):
    return [make_job(f"Job {i}") for i in range(6)]


# ==================== Schema Tests ==================== #

class TestJobSchemas:
    """Test job request schemas."""

    def test_title_stripped(self):
        assert JobCreateRequest(title="  Backend  ").title == "Backend"

    def test_non_list_tags_become_empty(self):
        assert JobCreateRequest(title="x", tags="remote").tags == []

    def test_update_non_list_tags_ignored(self):
        assert JobUpdateRequest(tags="remote").tags is None

    def test_camel_case_accepted(self):
        assert JobUpdateRequest.model_validate({"status": "archived"}).status == "archived"


# ==================== Create ==================== #

class TestCreateJob:
    """Test POST /jobs."""

    def test_create(self, client):
        response = client.post("/jobs", json={"title": "Senior Frontend Engineer", "tags": ["remote"]})

        assert response.status_code == 201
        job = response.json()
        assert job["title"] == "Senior Frontend Engineer"
        assert job["slug"] == "senior-frontend-engineer"
        assert job["status"] == "active"
        assert job["tags"] == ["remote"]
        assert job["order"] == 0
        assert job["createdAt"].endswith(("Z", "+00:00"))

    def test_appended_at_end(self, make_job):
        """order equals the number of jobs before the insert."""
        orders = [make_job(f"Role {i}")["order"] for i in range(3)]
        assert orders == [0, 1, 2]

    def test_empty_title_rejected(self, client):
        response = client.post("/jobs", json={"title": "   "})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Title is required"

    def test_missing_title_rejected(self, client):
        assert client.post("/jobs", json={}).status_code == 400

    def test_slug_collision_suffixed(self, make_job):
        first = make_job("Data Engineer")
        second = make_job("Data Engineer")
        third = make_job("data engineer!")

        assert first["slug"] == "data-engineer"
        assert second["slug"] == "data-engineer-2"
        assert third["slug"] == "data-engineer-3"

    def test_symbol_only_title_gets_fallback_slug(self, make_job):
        assert make_job("!!!")["slug"] == "job"


# ==================== Read ==================== #

class TestListJobs:
    """Test GET /jobs."""

    def test_pagination(self, client, make_job):
        """25 jobs, pageSize 10: page 3 has 5 items and total is 25."""
        for i in range(25):
            make_job(f"Job {i}")

        body = client.get("/jobs", params={"page": 3, "pageSize": 10}).json()

        assert body["total"] == 25
        assert body["page"] == 3
        assert body["pageSize"] == 10
        assert body["totalPages"] == 3
        assert len(body["data"]) == 5

    def test_lenient_page_params(self, client, make_job):
        make_job("Only")

        body = client.get("/jobs", params={"page": "abc", "pageSize": "0"}).json()

        assert body["page"] == 1
        assert body["pageSize"] == 10
        assert len(body["data"]) == 1

    def test_search_and_status(self, client, make_job):
        backend = make_job("Backend Engineer")
        make_job("Designer")
        client.patch(f"/jobs/{backend['id']}", json={"status": "archived"})

        searched = client.get("/jobs", params={"search": "backend"}).json()
        archived = client.get("/jobs", params={"status": "archived"}).json()
        active = client.get("/jobs", params={"status": "active"}).json()

        assert [j["title"] for j in searched["data"]] == ["Backend Engineer"]
        assert [j["title"] for j in archived["data"]] == ["Backend Engineer"]
        assert [j["title"] for j in active["data"]] == ["Designer"]

    def test_sort_by_title(self, client, make_job):
        for title in ("Zeta", "alpha", "Mu"):
            make_job(title)

        body = client.get("/jobs", params={"sort": "titleAsc"}).json()
        assert [j["title"] for j in body["data"]] == ["alpha", "Mu", "Zeta"]

        body = client.get("/jobs", params={"sort": "order:desc"}).json()
        assert [j["title"] for j in body["data"]] == ["Mu", "alpha", "Zeta"]

    def test_get_job(self, client, make_job):
        job = make_job("Backend")
        response = client.get(f"/jobs/{job['id']}")

        assert response.status_code == 200
        assert response.json()["slug"] == "backend"

    def test_get_unknown_job(self, client):
        response = client.get("/jobs/999")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestSlugAvailability:
    """Test GET /jobs/slug/{slug}."""

    def test_free_slug(self, client):
        assert client.get("/jobs/slug/anything").json() == {"available": True, "conflictId": None}

    def test_taken_slug(self, client, make_job):
        job = make_job("Backend")

        taken = client.get("/jobs/slug/backend").json()
        own = client.get("/jobs/slug/backend", params={"excludeId": job["id"]}).json()

        assert taken == {"available": False, "conflictId": job["id"]}
        assert own["available"] is True


# ==================== Update ==================== #

class TestUpdateJob:
    """Test PATCH /jobs/{id}."""

    def test_rename_rederives_slug(self, client, make_job):
        job = make_job("Backend")

        response = client.patch(f"/jobs/{job['id']}", json={"title": "Platform Engineer"})

        assert response.status_code == 200
        assert response.json()["title"] == "Platform Engineer"
        assert response.json()["slug"] == "platform-engineer"

    def test_rename_to_own_title_keeps_slug(self, client, make_job):
        job = make_job("Backend")
        response = client.patch(f"/jobs/{job['id']}", json={"title": "Backend"})
        assert response.json()["slug"] == "backend"

    def test_rename_collision(self, client, make_job):
        make_job("Backend")
        other = make_job("Frontend")

        response = client.patch(f"/jobs/{other['id']}", json={"title": "Backend"})
        assert response.json()["slug"] == "backend-2"

    def test_empty_title_rejected(self, client, make_job):
        job = make_job("Backend")

        response = client.patch(f"/jobs/{job['id']}", json={"title": " "})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Title cannot be empty"
        assert client.get(f"/jobs/{job['id']}").json()["title"] == "Backend"

    def test_tags_and_status(self, client, make_job):
        job = make_job("Backend", tags=["a"])

        body = client.patch(f"/jobs/{job['id']}", json={"tags": ["b", "c"], "status": "archived"}).json()

        assert body["tags"] == ["b", "c"]
        assert body["status"] == "archived"

    def test_unknown_status_ignored(self, client, make_job):
        job = make_job("Backend")
        body = client.patch(f"/jobs/{job['id']}", json={"status": "paused"}).json()
        assert body["status"] == "active"

    def test_unknown_job(self, client):
        assert client.patch("/jobs/999", json={"title": "x"}).status_code == 404


# ==================== Reorder ==================== #

class TestReorderJob:
    """Test PATCH /jobs/{id}/reorder."""

    def test_move_down(self, client, six_jobs):
        moved = six_jobs[2]

        response = client.patch(f"/jobs/{moved['id']}/reorder", json={"fromOrder": 2, "toOrder": 5})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "fromOrder": 2, "toOrder": 5}
        orders = board_orders(client)
        assert orders[moved["id"]] == 5
        assert sorted(orders.values()) == [0, 1, 2, 3, 4, 5]
        assert [orders[j["id"]] for j in six_jobs] == [0, 1, 5, 2, 3, 4]

    def test_move_up(self, client, six_jobs):
        moved = six_jobs[4]

        client.patch(f"/jobs/{moved['id']}/reorder", json={"fromOrder": 4, "toOrder": 0})

        orders = board_orders(client)
        assert [orders[j["id"]] for j in six_jobs] == [1, 2, 3, 4, 0, 5]

    def test_noop(self, client, six_jobs):
        before = board_orders(client)

        response = client.patch(f"/jobs/{six_jobs[1]['id']}/reorder", json={"fromOrder": 1, "toOrder": 1})

        assert response.status_code == 200
        assert board_orders(client) == before

    def test_out_of_range_leaves_board_unchanged(self, client, six_jobs):
        before = board_orders(client)

        response = client.patch(f"/jobs/{six_jobs[0]['id']}/reorder", json={"fromOrder": 0, "toOrder": 6})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "toOrder out of range"
        assert board_orders(client) == before

    def test_unknown_job(self, client, six_jobs):
        response = client.patch("/jobs/999/reorder", json={"fromOrder": 0, "toOrder": 1})
        assert response.status_code == 404

    def test_missing_body_fields(self, client, six_jobs):
        response = client.patch(f"/jobs/{six_jobs[0]['id']}/reorder", json={"toOrder": 1})
        assert response.status_code == 422

    def test_sorted_listing_after_moves(self, client, six_jobs):
        """Listing by order reflects a series of moves."""
        ids = [j["id"] for j in six_jobs]
        client.patch(f"/jobs/{ids[0]}/reorder", json={"fromOrder": 0, "toOrder": 3})
        client.patch(f"/jobs/{ids[5]}/reorder", json={"fromOrder": 5, "toOrder": 0})

        listed = [j["id"] for j in client.get("/jobs").json()["data"]]
        assert listed == [ids[5], ids[1], ids[2], ids[3], ids[0], ids[4]]
