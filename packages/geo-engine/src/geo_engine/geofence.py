from __future__ import annotations

from dataclasses import dataclass

from geo_engine.distance import haversine_distance_km
from geo_engine.models import GeoPoint


@dataclass(frozen=True)
class ServiceArea:
    """Circular collection zone around a depot or ward office. The boundary counts as inside."""

    center: GeoPoint
    radius_km: float

    def __post_init__(self) -> None:
        if self.radius_km < 0:
            raise ValueError("radius_km must be >= 0")

    def distance_from_center_km(self, point: GeoPoint) -> float:
        return haversine_distance_km(self.center, point)

    def contains(self, point: GeoPoint) -> bool:
        return self.distance_from_center_km(point) <= self.radius_km
