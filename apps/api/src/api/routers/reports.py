from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_report_service
from api.response import success_response
from api.schemas.report import FeedbackRequest, ReportCreateRequest, ReportStatusUpdateRequest
from api.security import require_session
from api.services.report_service import ReportService
from waste_core.core.session import SessionContext

router = APIRouter(prefix="/v1/reports", tags=["reports"])


@router.get("")
async def list_reports(
    session: SessionContext = Depends(require_session),
    service: ReportService = Depends(get_report_service),
) -> dict:
    reports = await service.list_reports(session)
    return success_response([report.to_record() for report in reports], meta={"count": len(reports)})


@router.post("", status_code=201)
async def create_report(
    body: ReportCreateRequest,
    session: SessionContext = Depends(require_session),
    service: ReportService = Depends(get_report_service),
) -> dict:
    report = await service.create_report(session, body)
    return success_response(report.to_record())


@router.get("/{report_id}")
async def get_report(
    report_id: str,
    session: SessionContext = Depends(require_session),
    service: ReportService = Depends(get_report_service),
) -> dict:
    report = await service.get_report(session, report_id)
    return success_response(report.to_record())


@router.patch("/{report_id}/status")
async def update_report_status(
    report_id: str,
    body: ReportStatusUpdateRequest,
    session: SessionContext = Depends(require_session),
    service: ReportService = Depends(get_report_service),
) -> dict:
    report = await service.update_report_status(session, report_id, body.status)
    return success_response(report.to_record())


@router.post("/{report_id}/feedback", status_code=201)
async def submit_feedback(
    report_id: str,
    body: FeedbackRequest,
    session: SessionContext = Depends(require_session),
    service: ReportService = Depends(get_report_service),
) -> dict:
    return success_response(await service.submit_feedback(session, report_id, body))
