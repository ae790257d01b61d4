from __future__ import annotations

from collections import Counter
from datetime import timedelta
import logging
from typing import Any

from devkit.timezone import now_utc, now_utc_iso
from geo_engine.models import GeoPoint
from shared.security import Role

from api.schemas.task import TaskCreateRequest
from api.schemas.worker import LocationUpdateRequest, WorkerAssignmentRequest
from api.services.task_service import TaskService
from waste_core.core.exceptions import NotFoundError, PermissionDeniedError, RemoteOperationError, ValidationError
from waste_core.core.models import Availability, Report, Task, TaskStatus, Worker
from waste_core.core.presence import DEFAULT_FRESHNESS_WINDOW
from waste_core.core.session import SessionContext
from waste_core.core.tables import NOTIFICATIONS_TABLE, PROFILES_TABLE, REPORTS_TABLE, TASKS_TABLE
from waste_core.location import FixedGeolocator, ReverseGeocoder, acquire_location
from waste_core.matching import WorkerDistance, rank_workers
from waste_core.store import TableGateway

logger = logging.getLogger(__name__)


class WorkerService:
    def __init__(
        self,
        gateway: TableGateway,
        task_service: TaskService,
        geocoder: ReverseGeocoder | None = None,
        *,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        geolocation_timeout_seconds: float = 10.0,
    ) -> None:
        self._gateway = gateway
        self._task_service = task_service
        self._geocoder = geocoder
        self._freshness_window = freshness_window
        self._geolocation_timeout_seconds = geolocation_timeout_seconds

    async def list_workers(self, session: SessionContext) -> list[dict[str, Any]]:
        """All municipality workers with their completed task counts."""
        _require_government(session)
        rows = await self._gateway.select(PROFILES_TABLE, {"role": Role.MUNICIPALITY.value}, order_by="full_name", descending=False)
        completed = await self._gateway.select(TASKS_TABLE, {"status": TaskStatus.COMPLETED.value}, order_by=None)
        counts = Counter(str(task["assigned_to"]) for task in completed)
        now = now_utc()
        return [
            {**Worker.from_profile(row, now, self._freshness_window).to_dict(), "completed_tasks": counts[str(row["user_id"])]}
            for row in rows
        ]

    async def list_available_workers(self, session: SessionContext) -> list[Worker]:
        _require_government(session)
        rows = await self._gateway.select(
            PROFILES_TABLE,
            {"role": Role.MUNICIPALITY.value, "availability_status": Availability.AVAILABLE.value},
            order_by="full_name",
            descending=False,
        )
        now = now_utc()
        return [
            Worker.from_profile(row, now, self._freshness_window)
            for row in rows
            if row.get("current_location_lat") is not None and row.get("current_location_lng") is not None
        ]

    async def find_closest_worker(self, session: SessionContext, target: GeoPoint) -> WorkerDistance | None:
        ranked = rank_workers(target, await self.list_available_workers(session))
        return ranked[0] if ranked else None

    async def assign_worker_to_task(
        self,
        session: SessionContext,
        worker_id: str,
        request: WorkerAssignmentRequest,
    ) -> Task:
        task = await self._task_service.create_task(
            session,
            TaskCreateRequest(
                report_id=request.report_id,
                assigned_to=worker_id,
                notes=request.description,
                task_location_lat=request.latitude,
                task_location_lng=request.longitude,
                task_address=request.address or None,
            ),
        )
        try:
            await self._gateway.insert(
                NOTIFICATIONS_TABLE,
                {
                    "user_id": worker_id,
                    "type": "task_assigned",
                    "title": "New Task Assigned",
                    "message": f"You have been assigned to: {request.title}",
                    "data": {"taskId": task.id, "reportId": request.report_id, "address": request.address},
                    "is_read": False,
                },
            )
        except RemoteOperationError:
            # task stays committed; notification failures are only logged
            logger.exception(
                "worker_notification_failed",
                extra={"component": "api", "task_id": task.id, "worker_id": worker_id},
            )
        logger.info(
            "worker_assigned",
            extra={"component": "api", "task_id": task.id, "worker_id": worker_id, "report_id": request.report_id},
        )
        return task

    async def auto_assign(self, session: SessionContext, report_id: str) -> tuple[Task, WorkerDistance]:
        _require_government(session)
        row = await self._gateway.get(REPORTS_TABLE, report_id)
        if row is None:
            raise NotFoundError(f"report {report_id} not found")
        report = Report.from_record(row)
        if report.location is None:
            raise ValidationError("report has no coordinates; assign a worker manually")
        closest = await self.find_closest_worker(session, report.location)
        if closest is None:
            raise NotFoundError("no online worker is available near this report")
        task = await self.assign_worker_to_task(
            session,
            closest.worker.user_id,
            WorkerAssignmentRequest(
                report_id=report.id,
                title=report.title,
                description=report.description,
                address=report.address or report.location.format(),
                latitude=report.location.lat,
                longitude=report.location.lng,
            ),
        )
        return task, closest

    async def update_location(self, session: SessionContext, request: LocationUpdateRequest) -> Worker:
        point = GeoPoint(lat=request.lat, lng=request.lng)
        address = request.address
        if not address:
            located = await acquire_location(FixedGeolocator(point), self._geocoder, self._geolocation_timeout_seconds)
            address = located.address if located else point.format()
        return await self._update_own_profile(
            session,
            {
                "current_location_lat": point.lat,
                "current_location_lng": point.lng,
                "current_address": address,
                "last_location_update": now_utc_iso(),
            },
        )

    async def clear_location(self, session: SessionContext) -> Worker:
        return await self._update_own_profile(
            session,
            {
                "current_location_lat": None,
                "current_location_lng": None,
                "current_address": None,
                "last_location_update": None,
            },
        )

    async def update_availability(self, session: SessionContext, availability: Availability) -> Worker:
        return await self._update_own_profile(session, {"availability_status": availability.value})

    async def _update_own_profile(self, session: SessionContext, changes: dict[str, Any]) -> Worker:
        if not session.is_municipality:
            raise PermissionDeniedError("only municipality workers share location and availability")
        rows = await self._gateway.select(PROFILES_TABLE, {"user_id": session.user_id}, order_by=None, limit=1)
        if not rows:
            raise NotFoundError(f"profile for {session.user_id} not found")
        _, updated = await self._gateway.update(PROFILES_TABLE, str(rows[0]["id"]), changes)
        return Worker.from_profile(updated, now_utc(), self._freshness_window)


def _require_government(session: SessionContext) -> None:
    if not session.is_government:
        raise PermissionDeniedError("only government staff can manage workers")
