from __future__ import annotations

from collections.abc import Callable
import logging

import httpx

from geo_engine.models import GeoPoint
from waste_core.location import ReverseGeocoder

logger = logging.getLogger(__name__)


class NominatimGeocodingClient(ReverseGeocoder):
    """Reverse geocoding against a Nominatim-compatible ``/reverse`` endpoint.

    Any upstream failure degrades to the raw coordinate text.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        user_agent: str = "waste-watch-api/0.1",
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent
        self._client_factory = client_factory

    async def reverse(self, point: GeoPoint) -> str:
        params = {"format": "json", "lat": point.lat, "lon": point.lng}
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(
                    f"{self._base_url}/reverse",
                    params=params,
                    headers={"User-Agent": self._user_agent},
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.warning(
                "reverse_geocode_upstream_failed",
                extra={"component": "api", "base_url": self._base_url},
                exc_info=True,
            )
            return point.format()
        if not isinstance(payload, dict):
            return point.format()
        return str(payload.get("display_name") or point.format())
