import base64

from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_job_service
from api.security import get_token_verifier
from api.services.job_service import JobService
from shared.security import AccessTokenVerifier
from waste_core.core.tables import JOB_LISTINGS_TABLE, PROFILES_TABLE
from waste_core.storage import InMemoryObjectStorage
from waste_core.store import InMemoryTableGateway

VERIFIER = AccessTokenVerifier(secret="test-secret")


def _auth(user_id: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {VERIFIER.issue(user_id, role)}"}


def _client() -> TestClient:
    gateway = InMemoryTableGateway(
        seed={
            JOB_LISTINGS_TABLE: [
                {
                    "id": "job-1",
                    "title": "Sanitation Supervisor",
                    "description": "Lead ward cleanup crews",
                    "department": "Sanitation",
                    "job_type": "full_time",
                    "posted_by": "gov-1",
                    "is_active": True,
                    "created_at": "2024-05-01T10:00:00+00:00",
                },
                {
                    "id": "job-closed",
                    "title": "Driver",
                    "description": "Closed listing",
                    "job_type": "contract",
                    "posted_by": "gov-1",
                    "is_active": False,
                    "created_at": "2024-05-02T10:00:00+00:00",
                },
            ],
            PROFILES_TABLE: [
                {"id": "p1", "user_id": "citizen-1", "full_name": "Asha", "email": "asha@city.test", "phone": "555-0100", "role": "citizen"}
            ],
        }
    )
    app = create_app()
    service = JobService(gateway, InMemoryObjectStorage("https://cdn.test/storage"))
    app.dependency_overrides[get_token_verifier] = lambda: VERIFIER
    app.dependency_overrides[get_job_service] = lambda: service
    return TestClient(app)


def test_only_active_jobs_are_listed_without_auth() -> None:
    client = _client()

    response = client.get("/v1/jobs")

    assert [item["id"] for item in response.json()["data"]] == ["job-1"]


def test_job_creation_is_government_only() -> None:
    client = _client()
    body = {"title": "Recycling Lead", "description": "Run the recycling yard"}

    created = client.post("/v1/jobs", headers=_auth("gov-1", "government"), json=body)
    forbidden = client.post("/v1/jobs", headers=_auth("citizen-1", "citizen"), json=body)

    assert created.status_code == 201
    assert created.json()["data"]["posted_by"] == "gov-1"
    assert created.json()["data"]["is_active"] is True
    assert forbidden.status_code == 403


def test_application_flow_with_joined_details() -> None:
    client = _client()
    citizen = _auth("citizen-1", "citizen")
    government = _auth("gov-1", "government")
    resume = {
        "filename": "cv.pdf",
        "content_type": "application/pdf",
        "content": base64.b64encode(b"%PDF-1.4").decode("ascii"),
    }

    uploaded = client.post("/v1/jobs/resumes", headers=citizen, json={"resume": resume})
    resume_url = uploaded.json()["data"]["resume_url"]
    applied = client.post(
        "/v1/jobs/job-1/applications",
        headers=citizen,
        json={"cover_letter": "I run the street cleanup group", "contact_phone": "555-0100", "resume_url": resume_url},
    )
    application_id = applied.json()["data"]["id"]
    listed = client.get("/v1/jobs/applications", headers=government)
    mine = client.get("/v1/jobs/applications/mine", headers=citizen)
    reviewed = client.patch(
        f"/v1/jobs/applications/{application_id}",
        headers=government,
        json={"status": "interview_scheduled", "interview_date": "2024-06-01T10:00:00+00:00"},
    )

    assert resume_url.startswith("https://cdn.test/storage/resumes/citizen-1/")
    assert applied.status_code == 201
    assert applied.json()["data"]["status"] == "pending"
    assert listed.json()["data"][0]["applicant"] == {"full_name": "Asha", "email": "asha@city.test", "phone": "555-0100"}
    assert listed.json()["data"][0]["job"]["title"] == "Sanitation Supervisor"
    assert mine.json()["meta"]["count"] == 1
    assert reviewed.json()["data"]["status"] == "interview_scheduled"
    assert reviewed.json()["data"]["reviewed_by"] == "gov-1"


def test_cannot_apply_to_inactive_job_or_upload_non_documents() -> None:
    client = _client()
    citizen = _auth("citizen-1", "citizen")
    image = {"filename": "me.png", "content_type": "image/png", "content": base64.b64encode(b"png").decode("ascii")}

    closed = client.post("/v1/jobs/job-closed/applications", headers=citizen, json={})
    upload = client.post("/v1/jobs/resumes", headers=citizen, json={"resume": image})

    assert closed.status_code == 404
    assert upload.status_code == 422


def test_application_review_requires_government() -> None:
    client = _client()

    response = client.get("/v1/jobs/applications", headers=_auth("citizen-1", "citizen"))

    assert response.status_code == 403
