"""Spherical distance and service-area helpers for report and worker coordinates."""

from geo_engine.distance import EARTH_RADIUS_KM, central_angle, haversine_distance_km, haversine_distance_meters
from geo_engine.geofence import ServiceArea
from geo_engine.models import GeoPoint

__all__ = [
    "EARTH_RADIUS_KM",
    "GeoPoint",
    "ServiceArea",
    "central_angle",
    "haversine_distance_km",
    "haversine_distance_meters",
]
