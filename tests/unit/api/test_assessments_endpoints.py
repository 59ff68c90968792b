"""
Tests for assessment endpoints.

Tests:
- Skeleton and save (create vs replace)
- Legacy question normalisation on save
- Validation and submission with conditional questions
- Submissions listing and existence checks
"""

import pytest

from api.routes.v1.assessments import parse_job_ids


SECTIONS = [
    {
        "id": "s1",
        "title": "Basics",
        "questions": [
            {"id": "q1", "type": "short", "title": "Name", "required": True},
            {"id": "q2", "type": "numeric", "label": "Years of experience", "required": True, "min": 0},
        ],
    },
    {
        "id": "s2",
        "title": "Relocation",
        "questions": [
            {"id": "q7", "type": "single", "title": "Relocate?", "options": ["Yes", "No"]},
            {
                "id": "q8", "type": "long", "title": "Where?", "required": True,
                "condition": {"questionId": "q7", "equalsValue": "Yes"},
            },
        ],
    },
]


@pytest.fixture
def job(make_job):
    return make_job("Backend Engineer")


@pytest.fixture
def assessment(client, job):
    response = client.put(f"/assessments/{job['id']}", json={"sections": SECTIONS, "version": 2})
    assert response.status_code == 201, response.text
    return response.json()


class TestParseJobIds:
    """Test the jobIds query parser."""

    @pytest.mark.parametrize("raw,expected", [
        ("1,2,3", [1, 2, 3]),
        (" 4 , ,x,0, 5", [4, 5]),
        ("", []),
        (None, []),
    ])
    def test_values(self, raw, expected):
        assert parse_job_ids(raw) == expected


class TestSaveAssessment:
    """Test GET/PUT /assessments/{jobId}."""

    def test_skeleton_when_missing(self, client, job):
        body = client.get(f"/assessments/{job['id']}").json()

        assert body["jobId"] == job["id"]
        assert body["version"] == 1
        assert body["sections"] == []
        assert body["updatedAt"]

    def test_first_save_is_201_then_200(self, client, job, assessment):
        response = client.put(f"/assessments/{job['id']}", json={"sections": []})

        assert assessment["version"] == 2
        assert response.status_code == 200
        assert response.json()["version"] == 1
        assert client.get(f"/assessments/{job['id']}").json()["sections"] == []

    def test_legacy_shapes_normalised(self, client, job, assessment):
        stored = client.get(f"/assessments/{job['id']}").json()
        q2 = stored["sections"][0]["questions"][1]

        assert q2["type"] == "number"
        assert q2["title"] == "Years of experience"
        assert "label" not in q2

    def test_show_if_normalised(self, client, job):
        sections = [{"id": "s", "title": "S", "questions": [
            {"id": "a", "type": "single", "title": "A", "options": ["y", "n"]},
            {"id": "b", "type": "short", "title": "B", "showIf": {"a": "y"}},
        ]}]

        body = client.put(f"/assessments/{job['id']}", json={"sections": sections}).json()

        assert body["sections"][0]["questions"][1]["condition"] == {"questionId": "a", "equalsValue": "y"}

    def test_unknown_question_type_rejected(self, client, job):
        sections = [{"id": "s", "title": "S", "questions": [{"id": "a", "type": "slider", "title": "A"}]}]
        response = client.put(f"/assessments/{job['id']}", json={"sections": sections})
        assert response.status_code == 422

    def test_unknown_job(self, client):
        assert client.put("/assessments/999", json={"sections": []}).status_code == 404


class TestValidateAndSubmit:
    """Test validate and submit."""

    def test_validate_hidden_question_skipped(self, client, job, assessment):
        body = client.post(
            f"/assessments/{job['id']}/validate",
            json={"answers": {"q1": "Ada", "q2": "3", "q7": "No"}},
        ).json()

        assert body == {"valid": True, "errors": {}}

    def test_validate_visible_question_required(self, client, job, assessment):
        body = client.post(
            f"/assessments/{job['id']}/validate",
            json={"answers": {"q1": "Ada", "q2": "abc", "q7": "Yes"}},
        ).json()

        assert body["valid"] is False
        assert body["errors"] == {"q2": "Must be a number", "q8": "Required"}

    def test_validate_out_of_range_number(self, client, job, assessment):
        response = client.post(
            f"/assessments/{job['id']}/validate",
            json={"answers": {"q1": "Ada", "q2": "0x" + "f" * 300, "q7": "No"}},
        )

        assert response.status_code == 200
        assert response.json()["errors"] == {"q2": "Must be a number"}

    def test_submit(self, client, job, assessment, make_candidate):
        candidate = make_candidate(job["id"])

        response = client.post(
            f"/assessments/{job['id']}/submit",
            json={"candidateId": candidate["id"], "answers": {"q1": "Ada", "q2": 25, "q7": "No"}},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["jobId"] == job["id"]
        assert body["candidateId"] == candidate["id"]
        assert set(body) == {"id", "jobId", "candidateId", "createdAt"}

    def test_submit_invalid_rejected(self, client, job, assessment):
        response = client.post(f"/assessments/{job['id']}/submit", json={"answers": {"q7": "Yes"}})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_INPUT"
        assert error["details"] == {"q1": "Required", "q2": "Required", "q8": "Required"}
        assert client.get(f"/assessments/{job['id']}/submissions").json()["data"] == []

    def test_submit_without_assessment_accepts_anything(self, client, job):
        response = client.post(f"/assessments/{job['id']}/submit", json={"answers": {"free": "form"}})
        assert response.status_code == 201

    def test_submit_unknown_candidate(self, client, job):
        response = client.post(f"/assessments/{job['id']}/submit", json={"candidateId": 999, "answers": {}})
        assert response.status_code == 404


class TestSubmissionsAndExists:
    """Test submissions listing and the exists map."""

    def test_submissions_newest_first(self, client, job, make_candidate):
        first = make_candidate(job["id"], name="A", email="a@x.io")
        second = make_candidate(job["id"], name="B", email="b@x.io")
        for candidate in (first, second, first):
            client.post(
                f"/assessments/{job['id']}/submit",
                json={"candidateId": candidate["id"], "answers": {"n": candidate["name"]}},
            )

        everyone = client.get(f"/assessments/{job['id']}/submissions").json()["data"]
        only_first = client.get(
            f"/assessments/{job['id']}/submissions", params={"candidateId": first["id"]}
        ).json()["data"]

        assert [s["candidateId"] for s in everyone] == [first["id"], second["id"], first["id"]]
        assert everyone[0]["id"] > everyone[1]["id"] > everyone[2]["id"]
        assert len(only_first) == 2
        assert only_first[0]["answers"] == {"n": "A"}

    def test_exists(self, client, make_job, job, assessment):
        empty = make_job("Designer")
        client.put(f"/assessments/{empty['id']}", json={"sections": []})
        missing = make_job("PM")

        body = client.get(
            "/assessments/exists", params={"jobIds": f"{job['id']},{empty['id']},{missing['id']}"}
        ).json()

        assert body == {"exists": {
            str(job["id"]): True,
            str(empty["id"]): False,
            str(missing["id"]): False,
        }}

    def test_exists_without_ids(self, client):
        assert client.get("/assessments/exists").json() == {"exists": {}}
