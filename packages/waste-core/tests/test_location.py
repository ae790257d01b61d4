import asyncio

import pytest

from geo_engine.models import GeoPoint

from waste_core.location import (
    FixedGeolocator,
    Geolocator,
    LocationPermissionDenied,
    ReverseGeocoder,
    acquire_location,
)

POINT = GeoPoint(lat=12.97161, lng=77.59456)


class SlowGeolocator(Geolocator):
    async def current_position(self) -> GeoPoint:
        await asyncio.sleep(1)
        return POINT


class DeniedGeolocator(Geolocator):
    async def current_position(self) -> GeoPoint:
        raise LocationPermissionDenied("user denied")


class StaticGeocoder(ReverseGeocoder):
    def __init__(self, address: str | None = None, error: Exception | None = None) -> None:
        self.address = address
        self.error = error

    async def reverse(self, point: GeoPoint) -> str:
        if self.error is not None:
            raise self.error
        return self.address or ""


@pytest.mark.asyncio
async def test_resolves_address() -> None:
    location = await acquire_location(FixedGeolocator(POINT), StaticGeocoder("MG Road, Bengaluru"))

    assert location is not None
    assert location.point == POINT
    assert location.address == "MG Road, Bengaluru"


@pytest.mark.asyncio
async def test_geocoder_failure_falls_back_to_coordinates() -> None:
    location = await acquire_location(FixedGeolocator(POINT), StaticGeocoder(error=RuntimeError("down")))

    assert location is not None
    assert location.address == "12.9716, 77.5946"


@pytest.mark.asyncio
async def test_timeout_and_denial_yield_none() -> None:
    assert await acquire_location(SlowGeolocator(), timeout_seconds=0.01) is None
    assert await acquire_location(DeniedGeolocator()) is None
