from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_municipality_service
from api.response import success_response
from api.security import require_session
from api.services.municipality_service import MunicipalityService
from waste_core.core.session import SessionContext

router = APIRouter(prefix="/v1/municipalities", tags=["municipalities"])


@router.get("")
async def list_municipalities(
    _session: SessionContext = Depends(require_session),
    service: MunicipalityService = Depends(get_municipality_service),
) -> dict:
    municipalities = await service.list_municipalities()
    online = sum(1 for municipality in municipalities if municipality.is_online)
    return success_response(
        [municipality.to_dict() for municipality in municipalities],
        meta={"total": len(municipalities), "online": online},
    )


@router.get("/match")
async def match_municipality(
    address: str = Query(..., min_length=1, max_length=500),
    _session: SessionContext = Depends(require_session),
    service: MunicipalityService = Depends(get_municipality_service),
) -> dict:
    matched = await service.best_match(address)
    return success_response(matched.to_dict() if matched else None, meta={"matched": matched is not None})


@router.post("/presence")
async def heartbeat(
    session: SessionContext = Depends(require_session),
    service: MunicipalityService = Depends(get_municipality_service),
) -> dict:
    municipality = await service.touch_presence(session)
    return success_response(municipality.to_dict())
