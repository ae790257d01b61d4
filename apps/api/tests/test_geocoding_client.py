from __future__ import annotations

import httpx
import pytest

from api.clients.geocoding_client import NominatimGeocodingClient
from geo_engine.models import GeoPoint

POINT = GeoPoint(lat=12.9716, lng=77.5946)


def build_client(handler):
    transport = httpx.MockTransport(handler)
    return NominatimGeocodingClient(
        base_url="https://geocoder.example.com/",
        timeout_seconds=5.0,
        client_factory=lambda: httpx.AsyncClient(transport=transport, timeout=5.0),
    )


@pytest.mark.asyncio
async def test_reverse_returns_display_name() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/reverse"
        assert request.url.params["format"] == "json"
        assert request.url.params["lat"] == "12.9716"
        assert request.url.params["lon"] == "77.5946"
        assert request.headers["user-agent"].startswith("waste-watch-api")
        return httpx.Response(status_code=200, json={"display_name": "MG Road, Bengaluru"})

    client = build_client(handler)

    assert await client.reverse(POINT) == "MG Road, Bengaluru"


@pytest.mark.asyncio
async def test_reverse_falls_back_on_http_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, json={"message": "down"})

    client = build_client(handler)

    assert await client.reverse(POINT) == "12.9716, 77.5946"


@pytest.mark.asyncio
async def test_reverse_falls_back_on_transport_error_and_missing_name() -> None:
    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    def nameless(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"error": "Unable to geocode"})

    assert await build_client(failing).reverse(POINT) == "12.9716, 77.5946"
    assert await build_client(nameless).reverse(POINT) == "12.9716, 77.5946"
