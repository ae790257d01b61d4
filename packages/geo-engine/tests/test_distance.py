import math

import pytest

from geo_engine.distance import EARTH_RADIUS_KM, central_angle, haversine_distance_km, haversine_distance_meters
from geo_engine.models import GeoPoint


def test_haversine_distance_is_zero_for_same_point() -> None:
    point = GeoPoint(lat=12.9716, lng=77.5946)
    assert haversine_distance_km(point, point) == 0.0


def test_haversine_distance_is_symmetric() -> None:
    depot = GeoPoint(lat=12.9716, lng=77.5946)
    ward_office = GeoPoint(lat=13.0358, lng=77.5970)
    assert haversine_distance_km(depot, ward_office) == pytest.approx(haversine_distance_km(ward_office, depot))


def test_one_degree_of_longitude_at_equator_is_about_111_km() -> None:
    origin = GeoPoint(lat=0.0, lng=0.0)
    east = GeoPoint(lat=0.0, lng=1.0)
    assert haversine_distance_km(origin, east) == pytest.approx(111.19, abs=1.0)


def test_meters_variant_scales_kilometers() -> None:
    origin = GeoPoint(lat=10.0, lng=20.0)
    target = GeoPoint(lat=10.1, lng=20.1)
    assert haversine_distance_meters(origin, target) == pytest.approx(haversine_distance_km(origin, target) * 1000)


def test_nan_coordinates_propagate() -> None:
    origin = GeoPoint(lat=float("nan"), lng=0.0)
    assert math.isnan(haversine_distance_km(origin, GeoPoint(lat=0.0, lng=0.0)))


def test_format_renders_four_decimals() -> None:
    assert GeoPoint(lat=10.123456, lng=-20.5).format() == "10.1235, -20.5000"


def test_from_optional_requires_both_coordinates() -> None:
    assert GeoPoint.from_optional(10.0, None) is None
    assert GeoPoint.from_optional(None, None) is None
    assert GeoPoint.from_optional(10, 20) == GeoPoint(lat=10.0, lng=20.0)


def test_antipodal_points_are_half_a_circumference_apart() -> None:
    north_pole = GeoPoint(lat=90.0, lng=0.0)
    south_pole = GeoPoint(lat=-90.0, lng=0.0)
    assert central_angle(north_pole, south_pole) == pytest.approx(math.pi)
    assert haversine_distance_km(north_pole, south_pole) == pytest.approx(math.pi * EARTH_RADIUS_KM)
