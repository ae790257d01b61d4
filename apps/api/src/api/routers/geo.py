from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from geo_engine.geofence import ServiceArea
from geo_engine.models import GeoPoint

from api.dependencies import get_geo_service
from api.response import success_response
from api.services.geo_service import GeoService

router = APIRouter(prefix="/v1/geo", tags=["geo"])


@router.get("/distance")
async def distance(
    origin_lat: float = Query(..., ge=-90, le=90),
    origin_lng: float = Query(..., ge=-180, le=180),
    target_lat: float = Query(..., ge=-90, le=90),
    target_lng: float = Query(..., ge=-180, le=180),
    service: GeoService = Depends(get_geo_service),
) -> dict:
    result = await service.distance(GeoPoint(lat=origin_lat, lng=origin_lng), GeoPoint(lat=target_lat, lng=target_lng))
    return success_response(result.model_dump(), meta={})


@router.get("/service-area/contains")
async def service_area_contains(
    center_lat: float = Query(..., ge=-90, le=90),
    center_lng: float = Query(..., ge=-180, le=180),
    point_lat: float = Query(..., ge=-90, le=90),
    point_lng: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(..., ge=0),
    service: GeoService = Depends(get_geo_service),
) -> dict:
    area = ServiceArea(center=GeoPoint(lat=center_lat, lng=center_lng), radius_km=radius_km)
    result = await service.check_service_area(area, GeoPoint(lat=point_lat, lng=point_lng))
    return success_response(result.model_dump(), meta={})


@router.get("/reverse")
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    service: GeoService = Depends(get_geo_service),
) -> dict:
    result = await service.reverse_geocode(GeoPoint(lat=lat, lng=lng))
    return success_response(result.model_dump(), meta={})
