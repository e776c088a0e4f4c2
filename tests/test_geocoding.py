"""Tests for distance and geocoding."""
import httpx
import pytest

from app.services.geocoding import GeocodingClient, calculate_distance


def test_distance_to_self_is_zero():
    assert calculate_distance(0, 0, 0, 0) == 0


def test_buenos_aires_to_asuncion():
    distance = calculate_distance(-34.6, -58.4, -25.3, -57.6)
    assert 1000 <= distance <= 1050


def test_distance_is_symmetric():
    there = calculate_distance(-34.6, -58.4, -25.3, -57.6)
    back = calculate_distance(-25.3, -57.6, -34.6, -58.4)
    assert there == pytest.approx(back)


async def test_geocode_returns_first_match():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers.get("user-agent")
        return httpx.Response(
            200,
            json=[
                {"lat": "-25.2637", "lon": "-57.5759"},
                {"lat": "1.0", "lon": "2.0"},
            ],
        )

    client = GeocodingClient(transport=httpx.MockTransport(handler))
    coordinates = await client.geocode_address("Asuncion, Paraguay")

    assert coordinates.lat == pytest.approx(-25.2637)
    assert coordinates.lng == pytest.approx(-57.5759)
    assert seen["params"] == {"format": "json", "q": "Asuncion, Paraguay", "limit": "1"}
    assert seen["user_agent"] == client.user_agent


async def test_geocode_no_match_returns_none():
    client = GeocodingClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
    assert await client.geocode_address("nowhere at all") is None


async def test_geocode_http_error_returns_none():
    client = GeocodingClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    assert await client.geocode_address("Asuncion") is None


async def test_geocode_transport_error_returns_none():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    client = GeocodingClient(transport=httpx.MockTransport(handler))
    assert await client.geocode_address("Asuncion") is None


async def test_geocode_blank_address_skips_request():
    def handler(request):
        raise AssertionError("no request expected")

    client = GeocodingClient(transport=httpx.MockTransport(handler))
    assert await client.geocode_address("   ") is None
