"""End-to-end tests for the HTTP API."""
from decimal import Decimal

import httpx
import pytest

from app.services.auth_client import auth_client
from app.services.geocoding import geocoding_client
from conftest import court_named

DAY = "2025-03-10"


@pytest.fixture
def nominatim(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if "Asuncion" in request.url.params.get("q", ""):
            return httpx.Response(200, json=[{"lat": "-25.2637", "lon": "-57.5759"}])
        return httpx.Response(200, json=[])

    monkeypatch.setattr(geocoding_client, "_transport", httpx.MockTransport(handler))


@pytest.fixture
def auth_provider(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("authorization") == "Bearer expired":
            return httpx.Response(401, json={"msg": "token expired"})
        return httpx.Response(200, json={})

    monkeypatch.setattr(auth_client, "_transport", httpx.MockTransport(handler))


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ============================================
# VENUES AND COURTS
# ============================================

async def test_create_venue_geocodes_address(client, owner, nominatim):
    response = await client.post(
        "/venues",
        json={"owner_id": owner.id, "name": "Padel Park", "address": "Asuncion, Paraguay"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["latitude"] == pytest.approx(-25.2637)
    assert body["longitude"] == pytest.approx(-57.5759)
    assert body["courts"] == []


async def test_create_venue_without_geocoding_match(client, owner, nominatim):
    response = await client.post(
        "/venues", json={"owner_id": owner.id, "name": "Padel Park", "address": "Unknown street"}
    )

    assert response.status_code == 201
    assert response.json()["latitude"] is None


async def test_venue_list_is_invalidated_after_create(client, owner, venue, nominatim):
    assert [v["name"] for v in (await client.get("/venues")).json()] == ["Club Central"]

    await client.post("/venues", json={"owner_id": owner.id, "name": "Arena Norte", "latitude": 1, "longitude": 1})

    assert [v["name"] for v in (await client.get("/venues")).json()] == ["Arena Norte", "Club Central"]


async def test_create_venue_with_courts(client, owner):
    response = await client.post(
        "/venues/with-courts",
        json={
            "venue": {"owner_id": owner.id, "name": "Padel Park", "latitude": -25.3, "longitude": -57.6},
            "courts": [{"name": "Cancha A", "price_per_hour": "90000"}, {"name": "Cancha B"}],
        },
    )

    assert response.status_code == 201
    assert response.json() == {"success": True}

    venues = (await client.get(f"/venues/owner/{owner.id}")).json()
    assert {c["name"] for c in venues[0]["courts"]} == {"Cancha A", "Cancha B"}


async def test_get_update_delete_venue(client, venue):
    response = await client.get(f"/venues/{venue.id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Club Central"

    response = await client.patch(f"/venues/{venue.id}", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert (await client.get("/venues")).json() == []

    assert (await client.delete(f"/venues/{venue.id}")).status_code == 204
    assert (await client.get(f"/venues/{venue.id}")).status_code == 404
    assert (await client.patch(f"/venues/{venue.id}", json={"name": "x"})).status_code == 404


async def test_nearby_venues(client, venue):
    response = await client.get("/venues/nearby", params={"lat": -25.3, "lng": -57.6, "radius_km": 10})

    assert response.status_code == 200
    [nearby] = response.json()
    assert nearby["id"] == venue.id
    assert nearby["distance_km"] < 10


async def test_upload_venue_image(client, venue, fake_s3):
    response = await client.post(
        f"/venues/{venue.id}/image",
        files={"file": ("cover photo.jpg", b"jpeg-bytes", "image/jpeg")},
    )

    assert response.status_code == 200
    image_url = response.json()["image_url"]
    assert image_url.startswith(f"http://localhost:9000/venue-images/venues/{venue.id}/")
    assert image_url.endswith("_cover_photo.jpg")


async def test_upload_venue_image_failure(client, venue, monkeypatch):
    async def failed_upload(*args, **kwargs):
        return None

    monkeypatch.setattr("app.services.data_service.storage_service.upload_image", failed_upload)

    response = await client.post(
        f"/venues/{venue.id}/image", files={"file": ("a.jpg", b"x", "image/jpeg")}
    )
    assert response.status_code == 502


async def test_add_update_delete_courts(client, venue):
    response = await client.post(
        f"/venues/{venue.id}/courts", json=[{"name": "Cancha 3", "type": "padel", "price_per_hour": "95000"}]
    )
    assert response.status_code == 201
    [court] = response.json()
    assert Decimal(court["price_per_hour"]) == Decimal("95000")

    response = await client.patch(f"/courts/{court['id']}", json={"is_active": False})
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert (await client.delete(f"/courts/{court['id']}")).status_code == 204
    assert (await client.patch(f"/courts/{court['id']}", json={"name": "x"})).status_code == 404
    assert (await client.post("/venues/missing/courts", json=[{"name": "x"}])).status_code == 404


async def test_upload_court_image(client, venue, fake_s3):
    court = court_named(venue, "Cancha 1")

    response = await client.post(
        f"/courts/{court.id}/image", files={"file": ("court.png", b"png", "image/png")}
    )

    assert response.status_code == 200
    assert f"/venue-images/courts/{court.id}_" in response.json()["image_url"]


# ============================================
# BOOKINGS AND SCHEDULE
# ============================================

def booking_payload(venue, player, start_time="18:00", court_name="Cancha 1"):
    return {
        "venue_id": venue.id,
        "court_id": court_named(venue, court_name).id,
        "player_id": player.id,
        "date": DAY,
        "start_time": start_time,
        "price": "100000",
    }


async def test_create_booking_and_conflict(client, venue, player):
    response = await client.post("/bookings", json=booking_payload(venue, player, "9"))
    assert response.status_code == 201
    body = response.json()
    assert body["start_time"] == "09:00"
    assert body["status"] == "ACTIVE"
    assert body["court_name"] == "Cancha 1"
    assert body["player_phone"] == "+595981000000"

    response = await client.post("/bookings", json=booking_payload(venue, player, "09:00"))
    assert response.status_code == 409


async def test_booking_blocked_by_disabled_slot(client, venue, owner, player):
    court = court_named(venue, "Cancha 1")
    response = await client.post(
        f"/venues/{venue.id}/disabled-slots/toggle",
        json={"court_id": court.id, "date": DAY, "time_slot": "18:00", "user_id": owner.id},
    )
    assert response.json() == {"success": True}

    assert (await client.post("/bookings", json=booking_payload(venue, player))).status_code == 409


async def test_toggle_slot_round_trip(client, venue, owner):
    court = court_named(venue, "Beach Court")
    toggle = {"court_id": court.id, "date": DAY, "time_slot": "7", "user_id": owner.id}

    assert (await client.get(f"/venues/{venue.id}/disabled-slots", params={"date": DAY})).json() == []

    await client.post(f"/venues/{venue.id}/disabled-slots/toggle", json=toggle)
    slots = (await client.get(f"/venues/{venue.id}/disabled-slots", params={"date": DAY})).json()
    assert [(s["time_slot"], s["reason"]) for s in slots] == [("07:00", "Manual lock")]

    await client.post(f"/venues/{venue.id}/disabled-slots/toggle", json=toggle)
    assert (await client.get(f"/venues/{venue.id}/disabled-slots", params={"date": DAY})).json() == []

    await client.post(f"/venues/{venue.id}/disabled-slots/toggle", json=toggle)
    [slot] = (await client.get(f"/venues/{venue.id}/disabled-slots", params={"date": DAY})).json()
    assert (await client.delete(f"/disabled-slots/{slot['id']}")).status_code == 204
    assert (await client.delete(f"/disabled-slots/{slot['id']}")).status_code == 404


async def test_booking_lists(client, venue, owner, player):
    await client.post("/bookings", json=booking_payload(venue, player, "18:00"))
    await client.post("/bookings", json=booking_payload(venue, player, "19:00"))

    assert len((await client.get("/bookings", params={"owner_id": owner.id})).json()) == 2
    assert len((await client.get("/bookings", params={"player_id": player.id})).json()) == 2
    assert (await client.get("/bookings", params={"player_id": "nobody"})).json() == []

    day = (await client.get(f"/bookings/venue/{venue.id}", params={"date": DAY})).json()
    assert [b["start_time"] for b in day] == ["18:00", "19:00"]


async def test_booking_groups(client, venue, player):
    for start in ("18:00", "19:00", "20:00"):
        await client.post("/bookings", json=booking_payload(venue, player, start))
    await client.post("/bookings", json=booking_payload(venue, player, "10:00", court_name="Beach Court"))

    groups = (await client.get("/bookings/groups", params={"player_id": player.id})).json()

    assert [(g["time_range"], g["count"]) for g in groups] == [("10:00 - 11:00", 1), ("18:00 - 21:00", 3)]
    assert Decimal(groups[1]["price"]) == Decimal("300000")


async def test_cancel_group_then_delete(client, venue, player):
    ids = []
    for start in ("18:00", "19:00"):
        ids.append((await client.post("/bookings", json=booking_payload(venue, player, start))).json()["id"])

    response = await client.post("/bookings/cancel-group", json={"ids": ids})
    assert response.json() == {"requested": 2, "updated": 2}

    groups = (await client.get("/bookings/groups", params={"player_id": player.id})).json()
    assert [g["status"] for g in groups] == ["CANCELLED"]

    response = await client.post("/bookings/cancel-group", json={"ids": ids})
    assert response.json() == {"requested": 2, "updated": 2}
    assert (await client.get("/bookings/groups", params={"player_id": player.id})).json() == []

    assert (await client.post("/bookings/cancel-group", json={"ids": []})).status_code == 422


async def test_cancel_group_with_repeated_id_keeps_booking(client, venue, player):
    booking_id = (await client.post("/bookings", json=booking_payload(venue, player))).json()["id"]

    response = await client.post("/bookings/cancel-group", json={"ids": [booking_id, booking_id]})

    assert response.json()["updated"] == 1
    groups = (await client.get("/bookings/groups", params={"player_id": player.id})).json()
    assert [(g["ids"], g["status"]) for g in groups] == [([booking_id], "CANCELLED")]


async def test_court_rename_refreshes_cached_bookings(client, venue, player):
    court = court_named(venue, "Cancha 1")
    await client.post("/bookings", json=booking_payload(venue, player))
    assert (await client.get("/bookings", params={"player_id": player.id})).json()[0]["court_name"] == "Cancha 1"

    await client.patch(f"/courts/{court.id}", json={"name": "Beach Court 3"})

    [booking] = (await client.get("/bookings", params={"player_id": player.id})).json()
    assert booking["court_name"] == "Beach Court 3"


async def test_venue_rename_refreshes_cached_bookings(client, venue, player):
    await client.post("/bookings", json=booking_payload(venue, player))
    assert (await client.get("/bookings", params={"player_id": player.id})).json()[0]["venue_name"] == "Club Central"

    await client.patch(f"/venues/{venue.id}", json={"name": "Club Norte"})

    [booking] = (await client.get("/bookings", params={"player_id": player.id})).json()
    assert booking["venue_name"] == "Club Norte"


async def test_status_changes(client, venue, player):
    booking_id = (await client.post("/bookings", json=booking_payload(venue, player))).json()["id"]

    response = await client.patch(f"/bookings/{booking_id}/status", json={"status": "COMPLETED"})
    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"

    response = await client.patch(f"/bookings/{booking_id}/status", json={"status": "ACTIVE"})
    assert response.status_code == 400

    assert (await client.post(f"/bookings/{booking_id}/cancel")).status_code == 400
    assert (await client.delete(f"/bookings/{booking_id}")).status_code == 400
    assert (await client.patch("/bookings/missing/status", json={"status": "CANCELLED"})).status_code == 404


async def test_cancel_and_delete_booking(client, venue, player):
    booking_id = (await client.post("/bookings", json=booking_payload(venue, player))).json()["id"]

    response = await client.post(f"/bookings/{booking_id}/cancel")
    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"

    assert (await client.delete(f"/bookings/{booking_id}")).status_code == 204
    assert (await client.delete(f"/bookings/{booking_id}")).status_code == 404


# ============================================
# DASHBOARD
# ============================================

async def test_dashboard(client, venue, player):
    await client.post("/bookings", json=booking_payload(venue, player, "18:00"))
    await client.post("/bookings", json=booking_payload(venue, player, "18:00", court_name="Beach Court"))
    cancelled = (await client.post("/bookings", json=booking_payload(venue, player, "20:00"))).json()
    await client.post(f"/bookings/{cancelled['id']}/cancel")

    response = await client.get(f"/venues/{venue.id}/dashboard", params={"date": DAY})

    assert response.status_code == 200
    body = response.json()
    assert Decimal(body["revenue"]) == Decimal("200000")
    assert body["revenue_growth"] == 100
    assert body["active_bookings"] == 2
    assert body["cancellations"] == 1
    assert body["court_count"] == 2
    assert len(body["revenue_series"]) == 7
    assert body["revenue_series"][-1]["date"] == DAY
    assert {s["name"]: s["value"] for s in body["sport_distribution"]} == {"Padel": 1, "Beach Tennis": 1}


async def test_dashboard_unknown_venue(client):
    assert (await client.get("/venues/missing/dashboard")).status_code == 404


# ============================================
# PROFILES, AUTH AND GEOCODING
# ============================================

async def test_profiles(client):
    response = await client.post(
        "/profiles", json={"id": "user-9", "email": "u9@example.com", "role": "OWNER"}
    )
    assert response.status_code == 200
    assert response.json()["role"] == "OWNER"

    response = await client.patch("/profiles/user-9", json={"phone": "+595981111111"})
    assert response.status_code == 200
    assert response.json()["phone"] == "+595981111111"

    assert (await client.get("/profiles/user-9")).json()["email"] == "u9@example.com"
    assert (await client.get("/profiles/nobody")).status_code == 404


async def test_password_reset(client, auth_provider):
    response = await client.post("/auth/password-reset", json={"email": "player@example.com"})

    assert response.status_code == 200
    assert response.json()["success"] is True


async def test_password_reset_failure_is_400(client, monkeypatch):
    monkeypatch.setattr(auth_client, "_transport", httpx.MockTransport(lambda request: httpx.Response(500)))

    response = await client.post("/auth/password-reset", json={"email": "player@example.com"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Could not send the reset email. Try again."


async def test_password_update(client, auth_provider):
    response = await client.post(
        "/auth/password-update",
        json={"access_token": "token", "password": "secret1", "confirm_password": "secret1"},
    )
    assert response.status_code == 200
    assert response.json()["redirect_to"] == "/"

    response = await client.post(
        "/auth/password-update",
        json={"access_token": "token", "password": "secret1", "confirm_password": "secret2"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Passwords do not match"

    response = await client.post(
        "/auth/password-update",
        json={"access_token": "expired", "password": "secret1", "confirm_password": "secret1"},
    )
    assert response.status_code == 400


async def test_geocoding_endpoints(client, nominatim):
    body = (await client.get("/geocoding", params={"address": "Asuncion"})).json()
    assert body["coordinates"]["lat"] == pytest.approx(-25.2637)

    body = (await client.get("/geocoding", params={"address": "Nowhere"})).json()
    assert body["coordinates"] is None

    assert (await client.get("/geocoding", params={"address": "ab"})).status_code == 422

    body = (
        await client.get("/geocoding/distance", params={"lat1": 0, "lng1": 0, "lat2": 0, "lng2": 0})
    ).json()
    assert body["distance_km"] == 0
