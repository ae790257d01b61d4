from __future__ import annotations

from dataclasses import replace
import logging
from typing import Any

from devkit.timezone import now_utc
from shared.security import clean_text

from api.schemas.job import ApplicationStatusUpdateRequest, JobApplicationRequest, JobCreateRequest
from waste_core.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from waste_core.core.models import ApplicationStatus, JobApplication, JobListing
from waste_core.core.session import SessionContext
from waste_core.core.tables import JOB_APPLICATIONS_TABLE, JOB_LISTINGS_TABLE, PROFILES_TABLE, RESUMES_BUCKET
from waste_core.storage import DEFAULT_MAX_IMAGE_BYTES, FileUpload, ObjectStorage, build_object_path
from waste_core.store import TableGateway

logger = logging.getLogger(__name__)

RESUME_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
_JOB_SUMMARY_FIELDS = ("title", "department", "job_type", "location")
_APPLICANT_FIELDS = ("full_name", "email", "phone")


class JobService:
    def __init__(self, gateway: TableGateway, storage: ObjectStorage, *, max_resume_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> None:
        self._gateway = gateway
        self._storage = storage
        self._max_resume_bytes = max_resume_bytes

    async def list_active_jobs(self) -> list[JobListing]:
        rows = await self._gateway.select(JOB_LISTINGS_TABLE, {"is_active": True}, order_by="created_at", descending=True)
        return [JobListing.from_record(row) for row in rows]

    async def create_job(self, session: SessionContext, request: JobCreateRequest) -> JobListing:
        _require_government(session)
        title = clean_text(request.title, max_length=255)
        description = clean_text(request.description)
        if not title or not description:
            raise ValidationError("title and description are required")
        stored = await self._gateway.insert(
            JOB_LISTINGS_TABLE,
            {
                "title": title,
                "description": description,
                "requirements": clean_text(request.requirements),
                "location": clean_text(request.location),
                "department": clean_text(request.department),
                "job_type": request.job_type,
                "salary_range": clean_text(request.salary_range),
                "posted_by": session.user_id,
                "is_active": True,
            },
        )
        logger.info("job_created", extra={"component": "api", "job_id": stored["id"]})
        return JobListing.from_record(stored)

    async def apply_to_job(self, session: SessionContext, job_id: str, request: JobApplicationRequest) -> JobApplication:
        job = await self._gateway.get(JOB_LISTINGS_TABLE, job_id)
        if job is None or not job.get("is_active", True):
            raise NotFoundError(f"job {job_id} not found")
        stored = await self._gateway.insert(
            JOB_APPLICATIONS_TABLE,
            {
                "job_id": job_id,
                "applicant_id": session.user_id,
                "resume_url": request.resume_url,
                "cover_letter": clean_text(request.cover_letter),
                "contact_phone": clean_text(request.contact_phone, max_length=32),
                "status": ApplicationStatus.PENDING.value,
            },
        )
        logger.info("job_application_submitted", extra={"component": "api", "job_id": job_id, "application_id": stored["id"]})
        return JobApplication.from_record(stored)

    async def upload_resume(self, session: SessionContext, upload: FileUpload) -> str:
        if upload.content_type not in RESUME_CONTENT_TYPES:
            raise ValidationError("resume must be a PDF or Word document")
        if upload.size > self._max_resume_bytes:
            raise ValidationError(f"resume exceeds {self._max_resume_bytes // (1024 * 1024)}MB")
        path = build_object_path(session.user_id, upload.filename, now_utc())
        return await self._storage.upload(RESUMES_BUCKET, path, upload.content, upload.content_type)

    async def list_applications(self, session: SessionContext) -> list[JobApplication]:
        _require_government(session)
        rows = await self._gateway.select(JOB_APPLICATIONS_TABLE, order_by="created_at", descending=True)
        return await self._with_details(rows)

    async def list_my_applications(self, session: SessionContext) -> list[JobApplication]:
        rows = await self._gateway.select(
            JOB_APPLICATIONS_TABLE,
            {"applicant_id": session.user_id},
            order_by="created_at",
            descending=True,
        )
        return await self._with_details(rows)

    async def update_application_status(
        self,
        session: SessionContext,
        application_id: str,
        request: ApplicationStatusUpdateRequest,
    ) -> JobApplication:
        _require_government(session)
        changes: dict[str, Any] = {"status": request.status.value, "reviewed_by": session.user_id}
        if request.interview_date:
            changes["interview_date"] = request.interview_date
        if request.interview_notes:
            changes["interview_notes"] = clean_text(request.interview_notes)
        _, updated = await self._gateway.update(JOB_APPLICATIONS_TABLE, application_id, changes)
        logger.info(
            "job_application_status_updated",
            extra={"component": "api", "application_id": application_id, "status": request.status.value},
        )
        return JobApplication.from_record(updated)

    async def _with_details(self, rows: list[dict[str, Any]]) -> list[JobApplication]:
        # joined summaries come from two secondary lookups rather than per-row reads
        if not rows:
            return []
        jobs = {
            str(job["id"]): {field: job.get(field) for field in _JOB_SUMMARY_FIELDS}
            for job in await self._gateway.select_in(JOB_LISTINGS_TABLE, "id", {row["job_id"] for row in rows})
        }
        applicants = {
            str(profile["user_id"]): {field: profile.get(field) for field in _APPLICANT_FIELDS}
            for profile in await self._gateway.select_in(PROFILES_TABLE, "user_id", {row["applicant_id"] for row in rows})
        }
        return [
            replace(
                application,
                job=jobs.get(application.job_id, {}),
                applicant=applicants.get(application.applicant_id, {}),
            )
            for application in map(JobApplication.from_record, rows)
        ]


def _require_government(session: SessionContext) -> None:
    if not session.is_government:
        raise PermissionDeniedError("only government staff can manage jobs")
