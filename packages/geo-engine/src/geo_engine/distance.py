"""Great-circle distance on a spherical Earth.

Coordinates are trusted as given: out-of-range or NaN inputs are not
validated and NaN propagates into the result.
"""

import math

from geo_engine.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def central_angle(start: GeoPoint, end: GeoPoint) -> float:
    """Angle in radians subtended at the Earth's centre by the two points."""
    phi_1, phi_2 = math.radians(start.lat), math.radians(end.lat)
    half_dphi = math.radians(end.lat - start.lat) / 2
    half_dlambda = math.radians(end.lng - start.lng) / 2
    h = math.sin(half_dphi) ** 2 + math.cos(phi_1) * math.cos(phi_2) * math.sin(half_dlambda) ** 2
    return 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_distance_km(start: GeoPoint, end: GeoPoint) -> float:
    return EARTH_RADIUS_KM * central_angle(start, end)


def haversine_distance_meters(start: GeoPoint, end: GeoPoint) -> float:
    return haversine_distance_km(start, end) * 1000.0
