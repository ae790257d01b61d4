from __future__ import annotations

import logging
from typing import Any

from devkit.timezone import now_utc, now_utc_iso
from geo_engine.models import GeoPoint
from shared.security import clean_text

from api.schemas.task import TaskCompletionRequest, TaskCreateRequest, TaskStatusUpdateRequest
from waste_core.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from waste_core.core.models import Report, ReportStatus, Task, TaskStatus
from waste_core.core.session import SessionContext, task_scope
from waste_core.core.status import check_report_transition, check_task_transition
from waste_core.core.tables import COMPLETION_PHOTOS_BUCKET, REPORTS_TABLE, TASKS_TABLE
from waste_core.storage import DEFAULT_MAX_IMAGE_BYTES, DEFAULT_MAX_IMAGES, ObjectStorage, upload_photos, validate_photo_uploads
from waste_core.store import TableGateway

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        gateway: TableGateway,
        storage: ObjectStorage,
        *,
        enforce_transitions: bool = False,
        max_photo_count: int = DEFAULT_MAX_IMAGES,
        max_photo_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
    ) -> None:
        self._gateway = gateway
        self._storage = storage
        self._enforce_transitions = enforce_transitions
        self._max_photo_count = max_photo_count
        self._max_photo_bytes = max_photo_bytes

    async def list_tasks(self, session: SessionContext) -> list[Task]:
        scope = task_scope(session)
        if scope is None:
            raise PermissionDeniedError("citizens have no tasks")
        rows = await self._gateway.select(TASKS_TABLE, scope, order_by="created_at", descending=True)
        return [Task.from_record(row) for row in rows]

    async def create_task(self, session: SessionContext, request: TaskCreateRequest) -> Task:
        if not session.is_government:
            raise PermissionDeniedError("only government staff can assign tasks")
        row = await self._gateway.get(REPORTS_TABLE, request.report_id)
        if row is None:
            raise NotFoundError(f"report {request.report_id} not found")
        report = Report.from_record(row)
        check_report_transition(report.status, ReportStatus.ASSIGNED, enforce=self._enforce_transitions)
        # explicit task coordinates and address override the report's own
        location = GeoPoint.from_optional(request.task_location_lat, request.task_location_lng) or report.location
        address = clean_text(request.task_address, max_length=500) or report.address
        stored = await self._gateway.insert(
            TASKS_TABLE,
            {
                "report_id": report.id,
                "assigned_to": request.assigned_to,
                "assigned_by": session.user_id,
                "status": TaskStatus.ASSIGNED.value,
                "notes": clean_text(request.notes, max_length=2000),
                "estimated_completion": request.estimated_completion,
                "task_location_lat": location.lat if location else None,
                "task_location_lng": location.lng if location else None,
                "task_address": address,
            },
        )
        await self._gateway.update(
            REPORTS_TABLE,
            report.id,
            {"status": ReportStatus.ASSIGNED.value, "assigned_to": request.assigned_to},
        )
        logger.info(
            "task_created",
            extra={"component": "api", "task_id": stored["id"], "report_id": report.id, "assigned_to": request.assigned_to},
        )
        return Task.from_record(stored)

    async def update_task_status(self, session: SessionContext, task_id: str, request: TaskStatusUpdateRequest) -> Task:
        task = await self._owned_task(session, task_id)
        check_task_transition(task.status, request.status, enforce=self._enforce_transitions)
        changes: dict[str, Any] = {"status": request.status.value}
        notes = clean_text(request.notes, max_length=2000)
        if notes:
            changes["notes"] = notes
        if request.completion_photo_urls:
            changes["completion_photo_urls"] = [*task.completion_photo_urls, *request.completion_photo_urls]
        if request.status is TaskStatus.COMPLETED:
            changes["actual_completion"] = now_utc_iso()
        _, updated = await self._gateway.update(TASKS_TABLE, task_id, changes)
        logger.info(
            "task_status_updated",
            extra={"component": "api", "task_id": task_id, "status": request.status.value, "actor": session.user_id},
        )
        return Task.from_record(updated)

    async def complete_task(self, session: SessionContext, task_id: str, request: TaskCompletionRequest) -> Task:
        if not request.photos:
            raise ValidationError("at least one completion photo is required")
        photos = validate_photo_uploads(
            [photo.to_upload() for photo in request.photos],
            max_images=self._max_photo_count,
            max_bytes=self._max_photo_bytes,
        )
        await self._owned_task(session, task_id)
        urls = await upload_photos(self._storage, COMPLETION_PHOTOS_BUCKET, session.user_id, photos, now_utc())
        return await self.update_task_status(
            session,
            task_id,
            TaskStatusUpdateRequest(status=TaskStatus.COMPLETED, notes=request.notes, completion_photo_urls=urls),
        )

    async def _owned_task(self, session: SessionContext, task_id: str) -> Task:
        if not session.role.is_staff:
            raise PermissionDeniedError("citizens cannot update tasks")
        row = await self._gateway.get(TASKS_TABLE, task_id)
        if row is None:
            raise NotFoundError(f"task {task_id} not found")
        task = Task.from_record(row)
        if session.is_municipality and task.assigned_to != session.user_id:
            raise PermissionDeniedError("task is assigned to another worker")
        return task
