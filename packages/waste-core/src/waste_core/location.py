"""Device location acquisition with a bounded wait and address fallback.

A denied permission or a timeout is an expected outcome and yields ``None``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass
import logging

from geo_engine.models import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_GEOLOCATION_TIMEOUT_SECONDS = 10.0


class LocationPermissionDenied(Exception):
    """Raised by a geolocator when the user refused location access."""


@dataclass(frozen=True)
class LocationData:
    point: GeoPoint
    address: str


class Geolocator(ABC):
    @abstractmethod
    async def current_position(self) -> GeoPoint:
        raise NotImplementedError


class ReverseGeocoder(ABC):
    @abstractmethod
    async def reverse(self, point: GeoPoint) -> str:
        raise NotImplementedError


class FixedGeolocator(Geolocator):
    def __init__(self, point: GeoPoint) -> None:
        self._point = point

    async def current_position(self) -> GeoPoint:
        return self._point


async def resolve_address(geocoder: ReverseGeocoder | None, point: GeoPoint) -> str:
    if geocoder is None:
        return point.format()
    try:
        address = await geocoder.reverse(point)
    except Exception:
        logger.warning("reverse_geocode_failed", extra={"component": "waste_core"}, exc_info=True)
        return point.format()
    return address or point.format()


async def acquire_location(
    geolocator: Geolocator,
    geocoder: ReverseGeocoder | None = None,
    timeout_seconds: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
) -> LocationData | None:
    try:
        point = await asyncio.wait_for(geolocator.current_position(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.info("geolocation_timeout", extra={"component": "waste_core", "timeout_seconds": timeout_seconds})
        return None
    except LocationPermissionDenied:
        logger.info("geolocation_denied", extra={"component": "waste_core"})
        return None
    return LocationData(point=point, address=await resolve_address(geocoder, point))
