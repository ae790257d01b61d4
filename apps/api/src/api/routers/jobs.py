from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_job_service
from api.response import success_response
from api.schemas.job import (
    ApplicationStatusUpdateRequest,
    JobApplicationRequest,
    JobCreateRequest,
    ResumeUploadRequest,
)
from api.security import require_session
from api.services.job_service import JobService
from waste_core.core.session import SessionContext

router = APIRouter(prefix="/v1/jobs", tags=["jobs"])


@router.get("")
async def list_jobs(service: JobService = Depends(get_job_service)) -> dict:
    jobs = await service.list_active_jobs()
    return success_response([job.to_record() for job in jobs], meta={"count": len(jobs)})


@router.post("", status_code=201)
async def create_job(
    body: JobCreateRequest,
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    job = await service.create_job(session, body)
    return success_response(job.to_record())


@router.post("/resumes", status_code=201)
async def upload_resume(
    body: ResumeUploadRequest,
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    url = await service.upload_resume(session, body.resume.to_upload())
    return success_response({"resume_url": url})


@router.get("/applications")
async def list_applications(
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    applications = await service.list_applications(session)
    return success_response([item.to_dict() for item in applications], meta={"count": len(applications)})


@router.get("/applications/mine")
async def list_my_applications(
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    applications = await service.list_my_applications(session)
    return success_response([item.to_dict() for item in applications], meta={"count": len(applications)})


@router.patch("/applications/{application_id}")
async def update_application_status(
    application_id: str,
    body: ApplicationStatusUpdateRequest,
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    application = await service.update_application_status(session, application_id, body)
    return success_response(application.to_dict())


@router.post("/{job_id}/applications", status_code=201)
async def apply_to_job(
    job_id: str,
    body: JobApplicationRequest,
    session: SessionContext = Depends(require_session),
    service: JobService = Depends(get_job_service),
) -> dict:
    application = await service.apply_to_job(session, job_id, body)
    return success_response(application.to_dict())
