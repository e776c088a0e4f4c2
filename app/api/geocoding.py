"""Geocoding endpoints."""
from fastapi import APIRouter, Query

from app.schemas.geocoding import DistanceResult, GeocodingResult
from app.services.geocoding import calculate_distance, geocoding_client

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@router.get("", response_model=GeocodingResult)
async def geocode(
    address: str = Query(..., min_length=3, description="Address to look up"),
):
    """Resolve an address to coordinates; coordinates are null when nothing matched."""
    coordinates = await geocoding_client.geocode_address(address)
    return GeocodingResult(address=address, coordinates=coordinates)


@router.get("/distance", response_model=DistanceResult)
async def distance(
    lat1: float = Query(..., ge=-90, le=90),
    lng1: float = Query(..., ge=-180, le=180),
    lat2: float = Query(..., ge=-90, le=90),
    lng2: float = Query(..., ge=-180, le=180),
):
    """Great-circle distance between two points in kilometers."""
    return DistanceResult(distance_km=calculate_distance(lat1, lng1, lat2, lng2))
