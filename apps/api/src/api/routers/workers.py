from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from geo_engine.models import GeoPoint

from api.dependencies import get_worker_service
from api.response import success_response
from api.schemas.worker import (
    AutoAssignRequest,
    AvailabilityUpdateRequest,
    LocationUpdateRequest,
    WorkerAssignmentRequest,
)
from api.security import require_session
from api.services.worker_service import WorkerService
from waste_core.core.session import SessionContext

router = APIRouter(prefix="/v1/workers", tags=["workers"])


@router.get("")
async def list_workers(
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    workers = await service.list_workers(session)
    return success_response(workers, meta={"count": len(workers)})


@router.get("/available")
async def list_available_workers(
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    workers = await service.list_available_workers(session)
    online = sum(1 for worker in workers if worker.is_online)
    return success_response([worker.to_dict() for worker in workers], meta={"count": len(workers), "online": online})


@router.get("/closest")
async def closest_worker(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    closest = await service.find_closest_worker(session, GeoPoint(lat=lat, lng=lng))
    if closest is None:
        return success_response(None)
    return success_response({"worker": closest.worker.to_dict(), "distance_km": round(closest.distance_km, 4)})


@router.post("/{worker_id}/assignments", status_code=201)
async def assign_worker(
    worker_id: str,
    body: WorkerAssignmentRequest,
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    task = await service.assign_worker_to_task(session, worker_id, body)
    return success_response(task.to_record())


@router.post("/auto-assign", status_code=201)
async def auto_assign(
    body: AutoAssignRequest,
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    task, closest = await service.auto_assign(session, body.report_id)
    return success_response(
        {"task": task.to_record(), "worker": closest.worker.to_dict(), "distance_km": round(closest.distance_km, 4)}
    )


@router.put("/me/location")
async def update_location(
    body: LocationUpdateRequest,
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    worker = await service.update_location(session, body)
    return success_response(worker.to_dict())


@router.delete("/me/location")
async def clear_location(
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    worker = await service.clear_location(session)
    return success_response(worker.to_dict())


@router.put("/me/availability")
async def update_availability(
    body: AvailabilityUpdateRequest,
    session: SessionContext = Depends(require_session),
    service: WorkerService = Depends(get_worker_service),
) -> dict:
    worker = await service.update_availability(session, body.availability_status)
    return success_response(worker.to_dict())
