"""Geocoding schemas."""
from pydantic import BaseModel
from typing import Optional


class Coordinates(BaseModel):
    """A latitude/longitude pair."""

    lat: float
    lng: float


class GeocodingResult(BaseModel):
    """Geocoding lookup result."""

    address: str
    coordinates: Optional[Coordinates] = None


class DistanceResult(BaseModel):
    """Great-circle distance between two points."""

    distance_km: float
