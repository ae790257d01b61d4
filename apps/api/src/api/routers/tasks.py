from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_task_service
from api.response import success_response
from api.schemas.task import TaskCompletionRequest, TaskCreateRequest, TaskStatusUpdateRequest
from api.security import require_session
from api.services.task_service import TaskService
from waste_core.core.session import SessionContext

router = APIRouter(prefix="/v1/tasks", tags=["tasks"])


@router.get("")
async def list_tasks(
    session: SessionContext = Depends(require_session),
    service: TaskService = Depends(get_task_service),
) -> dict:
    tasks = await service.list_tasks(session)
    return success_response([task.to_record() for task in tasks], meta={"count": len(tasks)})


@router.post("", status_code=201)
async def create_task(
    body: TaskCreateRequest,
    session: SessionContext = Depends(require_session),
    service: TaskService = Depends(get_task_service),
) -> dict:
    task = await service.create_task(session, body)
    return success_response(task.to_record())


@router.patch("/{task_id}/status")
async def update_task_status(
    task_id: str,
    body: TaskStatusUpdateRequest,
    session: SessionContext = Depends(require_session),
    service: TaskService = Depends(get_task_service),
) -> dict:
    task = await service.update_task_status(session, task_id, body)
    return success_response(task.to_record())


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: str,
    body: TaskCompletionRequest,
    session: SessionContext = Depends(require_session),
    service: TaskService = Depends(get_task_service),
) -> dict:
    task = await service.complete_task(session, task_id, body)
    return success_response(task.to_record())
