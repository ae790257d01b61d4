import asyncio
from datetime import timedelta

from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_worker_service
from api.security import get_token_verifier
from api.services.task_service import TaskService
from api.services.worker_service import WorkerService
from devkit.timezone import now_utc
from geo_engine.models import GeoPoint
from shared.security import AccessTokenVerifier
from waste_core.core.exceptions import RemoteOperationError
from waste_core.core.tables import NOTIFICATIONS_TABLE, PROFILES_TABLE, REPORTS_TABLE, TASKS_TABLE
from waste_core.location import ReverseGeocoder
from waste_core.storage import InMemoryObjectStorage
from waste_core.store import InMemoryTableGateway

VERIFIER = AccessTokenVerifier(secret="test-secret")


def _auth(user_id: str, role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {VERIFIER.issue(user_id, role)}"}


def _minutes_ago(minutes: float) -> str:
    return (now_utc() - timedelta(minutes=minutes)).isoformat()


def _worker(user_id: str, name: str, lat: float | None, lng: float | None, minutes: float | None, availability: str = "available") -> dict:
    return {
        "id": f"profile-{user_id}",
        "user_id": user_id,
        "full_name": name,
        "email": f"{user_id}@city.test",
        "role": "municipality",
        "current_location_lat": lat,
        "current_location_lng": lng,
        "availability_status": availability,
        "last_location_update": _minutes_ago(minutes) if minutes is not None else None,
    }


def _seeded(gateway_cls: type[InMemoryTableGateway] = InMemoryTableGateway) -> InMemoryTableGateway:
    return gateway_cls(
        seed={
            PROFILES_TABLE: [
                # A is online about 1.1 km from the report, B is closer but stale
                _worker("worker-a", "Asha", 12.98, 77.59, 2),
                _worker("worker-b", "Bala", 12.9705, 77.59, 10),
                _worker("worker-c", "Chitra", 12.971, 77.59, 1, availability="busy"),
                _worker("worker-d", "Dev", None, None, 1),
                {"id": "profile-citizen", "user_id": "citizen-1", "full_name": "Citizen", "role": "citizen"},
            ],
            REPORTS_TABLE: [
                {
                    "id": "r1",
                    "reporter_id": "citizen-1",
                    "title": "Overflowing bin",
                    "waste_type": "dry",
                    "status": "verified",
                    "location_lat": 12.97,
                    "location_lng": 77.59,
                    "address": "MG Road",
                    "created_at": "2024-05-01T10:00:00+00:00",
                },
                {
                    "id": "r-no-coords",
                    "reporter_id": "citizen-1",
                    "title": "Somewhere",
                    "waste_type": "wet",
                    "status": "verified",
                    "created_at": "2024-05-01T11:00:00+00:00",
                },
            ],
            TASKS_TABLE: [
                {
                    "id": "t-done",
                    "report_id": "r1",
                    "assigned_to": "worker-a",
                    "assigned_by": "gov-1",
                    "status": "completed",
                    "created_at": "2024-04-01T10:00:00+00:00",
                }
            ],
        }
    )


class StaticGeocoder(ReverseGeocoder):
    async def reverse(self, point: GeoPoint) -> str:
        return "Cubbon Park, Bengaluru"


def _client(gateway: InMemoryTableGateway) -> TestClient:
    app = create_app()
    tasks = TaskService(gateway, InMemoryObjectStorage())
    service = WorkerService(gateway, tasks, StaticGeocoder())
    app.dependency_overrides[get_token_verifier] = lambda: VERIFIER
    app.dependency_overrides[get_worker_service] = lambda: service
    return TestClient(app)


def test_available_workers_have_coordinates_and_derived_online_flag() -> None:
    client = _client(_seeded())

    response = client.get("/v1/workers/available", headers=_auth("gov-1", "government"))
    body = response.json()
    by_id = {item["user_id"]: item for item in body["data"]}

    assert response.status_code == 200
    assert set(by_id) == {"worker-a", "worker-b"}
    assert by_id["worker-a"]["is_online"] is True
    assert by_id["worker-b"]["is_online"] is False
    assert body["meta"]["online"] == 1


def test_worker_listing_includes_completed_task_counts() -> None:
    client = _client(_seeded())

    response = client.get("/v1/workers", headers=_auth("gov-1", "government"))
    counts = {item["user_id"]: item["completed_tasks"] for item in response.json()["data"]}

    assert counts == {"worker-a": 1, "worker-b": 0, "worker-c": 0, "worker-d": 0}


def test_worker_management_is_government_only() -> None:
    client = _client(_seeded())

    response = client.get("/v1/workers/available", headers=_auth("worker-a", "municipality"))

    assert response.status_code == 403


def test_closest_worker_skips_stale_and_busy_workers() -> None:
    client = _client(_seeded())

    response = client.get("/v1/workers/closest?lat=12.97&lng=77.59", headers=_auth("gov-1", "government"))
    data = response.json()["data"]

    assert data["worker"]["user_id"] == "worker-a"
    assert 1.0 < data["distance_km"] < 1.2


def test_auto_assign_creates_task_and_notification() -> None:
    gateway = _seeded()
    client = _client(gateway)

    response = client.post("/v1/workers/auto-assign", headers=_auth("gov-1", "government"), json={"report_id": "r1"})
    data = response.json()["data"]
    notifications = asyncio.run(gateway.select(NOTIFICATIONS_TABLE, {"user_id": "worker-a"}))

    assert response.status_code == 201
    assert data["task"]["assigned_to"] == "worker-a"
    assert data["worker"]["user_id"] == "worker-a"
    assert len(notifications) == 1
    assert notifications[0]["title"] == "New Task Assigned"
    assert notifications[0]["message"] == "You have been assigned to: Overflowing bin"
    assert notifications[0]["data"]["taskId"] == data["task"]["id"]


def test_auto_assign_without_coordinates_or_workers() -> None:
    client = _client(_seeded())
    headers = _auth("gov-1", "government")

    no_coords = client.post("/v1/workers/auto-assign", headers=headers, json={"report_id": "r-no-coords"})

    empty = _client(InMemoryTableGateway(seed={REPORTS_TABLE: _seeded_reports()}))
    no_workers = empty.post("/v1/workers/auto-assign", headers=headers, json={"report_id": "r1"})

    assert no_coords.status_code == 422
    assert no_workers.status_code == 404


def _seeded_reports() -> list[dict]:
    return [
        {
            "id": "r1",
            "reporter_id": "citizen-1",
            "title": "Overflowing bin",
            "waste_type": "dry",
            "status": "verified",
            "location_lat": 12.97,
            "location_lng": 77.59,
        }
    ]


def test_manual_assignment_notifies_worker() -> None:
    gateway = _seeded()
    client = _client(gateway)

    response = client.post(
        "/v1/workers/worker-b/assignments",
        headers=_auth("gov-1", "government"),
        json={"report_id": "r1", "title": "Overflowing bin", "address": "MG Road"},
    )
    notifications = asyncio.run(gateway.select(NOTIFICATIONS_TABLE, {"user_id": "worker-b"}))

    assert response.status_code == 201
    assert response.json()["data"]["assigned_to"] == "worker-b"
    assert notifications[0]["data"]["address"] == "MG Road"


def test_manual_assignment_uses_requested_task_location_and_address() -> None:
    gateway = _seeded()
    client = _client(gateway)

    response = client.post(
        "/v1/workers/worker-b/assignments",
        headers=_auth("gov-1", "government"),
        json={"report_id": "r1", "title": "Overflowing bin", "address": "Gate 4, Depot Lane", "latitude": 11.5, "longitude": 76.25},
    )
    task = response.json()["data"]

    assert response.status_code == 201
    assert (task["task_location_lat"], task["task_location_lng"]) == (11.5, 76.25)
    assert task["task_address"] == "Gate 4, Depot Lane"


def test_manual_assignment_without_location_falls_back_to_report() -> None:
    client = _client(_seeded())

    response = client.post(
        "/v1/workers/worker-b/assignments",
        headers=_auth("gov-1", "government"),
        json={"report_id": "r1", "title": "Overflowing bin"},
    )
    task = response.json()["data"]

    assert (task["task_location_lat"], task["task_location_lng"]) == (12.97, 77.59)
    assert task["task_address"] == "MG Road"


class NotificationOutageGateway(InMemoryTableGateway):
    async def insert(self, table: str, record: dict) -> dict:
        if table == NOTIFICATIONS_TABLE:
            raise RemoteOperationError("notifications insert rejected")
        return await super().insert(table, record)


def test_assignment_survives_notification_failure_without_duplicate_tasks() -> None:
    gateway = _seeded(NotificationOutageGateway)
    client = _client(gateway)

    response = client.post(
        "/v1/workers/worker-b/assignments",
        headers=_auth("gov-1", "government"),
        json={"report_id": "r1", "title": "Overflowing bin", "address": "MG Road"},
    )
    tasks = asyncio.run(gateway.select(TASKS_TABLE, {"assigned_to": "worker-b"}))

    assert response.status_code == 201
    assert [task["id"] for task in tasks] == [response.json()["data"]["id"]]
    assert asyncio.run(gateway.select(NOTIFICATIONS_TABLE)) == []


def test_location_update_reverse_geocodes_and_marks_online() -> None:
    client = _client(_seeded())
    headers = _auth("worker-b", "municipality")

    updated = client.put("/v1/workers/me/location", headers=headers, json={"lat": 12.975, "lng": 77.6})
    cleared = client.delete("/v1/workers/me/location", headers=headers)

    assert updated.status_code == 200
    assert updated.json()["data"]["current_address"] == "Cubbon Park, Bengaluru"
    assert updated.json()["data"]["is_online"] is True
    assert cleared.json()["data"]["current_location_lat"] is None
    assert cleared.json()["data"]["is_online"] is False


def test_availability_update_is_for_workers_only() -> None:
    client = _client(_seeded())

    updated = client.put("/v1/workers/me/availability", headers=_auth("worker-a", "municipality"), json={"availability_status": "busy"})
    citizen = client.put("/v1/workers/me/availability", headers=_auth("citizen-1", "citizen"), json={"availability_status": "busy"})

    assert updated.json()["data"]["availability_status"] == "busy"
    assert citizen.status_code == 403
