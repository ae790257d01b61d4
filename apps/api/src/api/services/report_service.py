from __future__ import annotations

import logging
from typing import Any

from devkit.timezone import now_utc, now_utc_iso
from shared.security import clean_text

from api.schemas.report import FeedbackRequest, ReportCreateRequest
from waste_core.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from waste_core.core.models import Report, ReportStatus
from waste_core.core.session import SessionContext, report_scope
from waste_core.core.status import check_report_transition
from waste_core.core.tables import FEEDBACK_TABLE, REPORT_PHOTOS_BUCKET, REPORTS_TABLE
from waste_core.storage import DEFAULT_MAX_IMAGE_BYTES, DEFAULT_MAX_IMAGES, ObjectStorage, upload_photos, validate_photo_uploads
from waste_core.store import TableGateway

logger = logging.getLogger(__name__)


class ReportService:
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

    async def list_reports(self, session: SessionContext) -> list[Report]:
        rows = await self._gateway.select(REPORTS_TABLE, report_scope(session), order_by="created_at", descending=True)
        return [Report.from_record(row) for row in rows]

    async def get_report(self, session: SessionContext, report_id: str) -> Report:
        row = await self._gateway.get(REPORTS_TABLE, report_id)
        scope = report_scope(session)
        if row is None or any(row.get(column) != value for column, value in scope.items()):
            raise NotFoundError(f"report {report_id} not found")
        return Report.from_record(row)

    async def create_report(self, session: SessionContext, request: ReportCreateRequest) -> Report:
        if not session.is_citizen:
            raise PermissionDeniedError("only citizens can submit reports")
        title = clean_text(request.title, max_length=255)
        if not title:
            raise ValidationError("title is required")
        photos = validate_photo_uploads(
            [photo.to_upload() for photo in request.photos],
            max_images=self._max_photo_count,
            max_bytes=self._max_photo_bytes,
        )
        photo_urls = await upload_photos(self._storage, REPORT_PHOTOS_BUCKET, session.user_id, photos, now_utc())
        stored = await self._gateway.insert(
            REPORTS_TABLE,
            {
                "reporter_id": session.user_id,
                "title": title,
                "description": clean_text(request.description),
                "waste_type": request.waste_type.value,
                "priority": request.priority.value,
                "location_lat": request.location_lat,
                "location_lng": request.location_lng,
                "address": clean_text(request.address, max_length=500),
                "status": ReportStatus.PENDING.value,
                "photo_urls": photo_urls,
            },
        )
        logger.info(
            "report_created",
            extra={"component": "api", "report_id": stored["id"], "photo_count": len(photo_urls)},
        )
        return Report.from_record(stored)

    async def update_report_status(self, session: SessionContext, report_id: str, status: ReportStatus) -> Report:
        if not session.role.is_staff:
            raise PermissionDeniedError("citizens cannot change report status")
        row = await self._gateway.get(REPORTS_TABLE, report_id)
        if row is None:
            raise NotFoundError(f"report {report_id} not found")
        check_report_transition(ReportStatus(row["status"]), status, enforce=self._enforce_transitions)
        changes: dict[str, Any] = {"status": status.value}
        if status is ReportStatus.VERIFIED:
            changes["verified_by"] = session.user_id
            changes["verified_at"] = now_utc_iso()
        elif status is ReportStatus.COMPLETED:
            changes["completed_at"] = now_utc_iso()
        _, updated = await self._gateway.update(REPORTS_TABLE, report_id, changes)
        logger.info(
            "report_status_updated",
            extra={"component": "api", "report_id": report_id, "status": status.value, "actor": session.user_id},
        )
        return Report.from_record(updated)

    async def submit_feedback(self, session: SessionContext, report_id: str, request: FeedbackRequest) -> dict[str, Any]:
        if not session.is_citizen:
            raise PermissionDeniedError("only citizens can leave feedback")
        if request.rating is None or not 1 <= request.rating <= 5:
            raise ValidationError("please provide a rating between 1 and 5 before submitting")
        report = await self.get_report(session, report_id)
        return await self._gateway.insert(
            FEEDBACK_TABLE,
            {
                "report_id": report.id,
                "citizen_id": session.user_id,
                "rating": request.rating,
                "comment": clean_text(request.comment, max_length=2000),
            },
        )
