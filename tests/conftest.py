"""Shared fixtures: a throwaway SQLite database and an API client."""
import os
import tempfile

_DB_PATH = os.path.join(tempfile.gettempdir(), f"court_booking_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["COMPLETION_ENABLED"] = "false"

from datetime import date  # noqa: E402
from decimal import Decimal  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.database import AsyncSessionLocal, Base, engine  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models.profile import UserRole  # noqa: E402
from app.schemas.booking import BookingCreate  # noqa: E402
from app.schemas.court import CourtCreate  # noqa: E402
from app.schemas.venue import VenueCreate  # noqa: E402
from app.services.data_cache import data_hooks  # noqa: E402
from app.services.data_service import data_service  # noqa: E402
from app.services.storage import storage_service  # noqa: E402


class FakeS3:
    """Minimal stand-in for the boto3 S3 client."""

    def __init__(self):
        self.objects = {}

    def head_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {"ContentLength": len(self.objects[(Bucket, Key)]["Body"])}

    def put_object(self, Bucket, Key, Body, ContentType, CacheControl):
        self.objects[(Bucket, Key)] = {
            "Body": Body,
            "ContentType": ContentType,
            "CacheControl": CacheControl,
        }


@pytest.fixture(autouse=True)
async def database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    data_hooks.cache.clear()
    yield
    data_hooks.cache.clear()
    await engine.dispose()


@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def fake_s3(monkeypatch):
    s3 = FakeS3()
    monkeypatch.setattr(storage_service, "_client", s3)
    return s3


@pytest.fixture
async def owner(db):
    return await data_service.ensure_profile(
        db, "owner-1", email="owner@example.com", role=UserRole.OWNER, full_name="Olga Owner"
    )


@pytest.fixture
async def player(db):
    return await data_service.ensure_profile(
        db, "player-1", email="player@example.com", role=UserRole.PLAYER,
        full_name="Pablo Player", phone="+595981000000",
    )


@pytest.fixture
async def venue(db, owner):
    created = await data_service.create_venue(
        db,
        VenueCreate(
            owner_id=owner.id,
            name="Club Central",
            address="Av. Mariscal Lopez 1234, Asuncion",
            latitude=-25.29,
            longitude=-57.58,
            amenities=["parking", "showers"],
        ),
    )
    await data_service.add_courts(
        db,
        created.id,
        [
            CourtCreate(name="Cancha 1", type="padel", price_per_hour=Decimal("100000")),
            CourtCreate(name="Beach Court", type="beach tennis", price_per_hour=Decimal("80000")),
        ],
    )
    return await data_service.get_venue(db, created.id)


def court_named(venue, name):
    return next(court for court in venue.courts if court.name == name)


@pytest.fixture
def make_booking(db, venue, player):
    async def _make(start_time="18:00", day=date(2025, 3, 10), court_name="Cancha 1", price="100000", player_id=None):
        return await data_service.create_booking(
            db,
            BookingCreate(
                venue_id=venue.id,
                court_id=court_named(venue, court_name).id,
                player_id=player_id or player.id,
                date=day,
                start_time=start_time,
                price=Decimal(price),
            ),
        )

    return _make
