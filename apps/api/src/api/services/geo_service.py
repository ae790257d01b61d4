from __future__ import annotations

from geo_engine.distance import haversine_distance_km, haversine_distance_meters
from geo_engine.geofence import ServiceArea
from geo_engine.models import GeoPoint

from api.schemas.geo import GeoDistanceResult, ReverseGeocodeResult, ServiceAreaResult
from waste_core.location import ReverseGeocoder, resolve_address


class GeoService:
    def __init__(self, geocoder: ReverseGeocoder | None = None) -> None:
        self._geocoder = geocoder

    async def distance(self, origin: GeoPoint, target: GeoPoint) -> GeoDistanceResult:
        return GeoDistanceResult(
            distance_km=round(haversine_distance_km(origin, target), 4),
            distance_meters=round(haversine_distance_meters(origin, target), 2),
        )

    async def check_service_area(self, area: ServiceArea, point: GeoPoint) -> ServiceAreaResult:
        return ServiceAreaResult(
            inside=area.contains(point),
            distance_km=round(area.distance_from_center_km(point), 4),
            radius_km=area.radius_km,
        )

    async def reverse_geocode(self, point: GeoPoint) -> ReverseGeocodeResult:
        """Resolve a readable address, or the raw coordinate text when the geocoder cannot."""
        return ReverseGeocodeResult(lat=point.lat, lng=point.lng, address=await resolve_address(self._geocoder, point))
