"""Venue endpoints."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.venue import (
    NearbyVenue,
    VenueCreate,
    VenueInDB,
    VenueUpdate,
    VenueWithCourtsCreate,
)
from app.services.data_cache import data_hooks
from app.services.data_service import data_service, is_permission_error
from app.services.geocoding import geocoding_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/venues", tags=["venues"])


async def _fill_coordinates(venue: VenueCreate) -> VenueCreate:
    """Geocode the address when the venue has no coordinates yet."""
    if venue.latitude is not None and venue.longitude is not None:
        return venue
    if not venue.address:
        return venue

    coordinates = await geocoding_client.geocode_address(venue.address)
    if coordinates:
        return venue.model_copy(update={"latitude": coordinates.lat, "longitude": coordinates.lng})
    return venue


@router.get("", response_model=List[VenueInDB])
async def list_venues():
    """
    List active venues with their courts.

    Returns:
        Active venues ordered by name
    """
    result = await data_hooks.venues()
    return result.data


@router.get("/nearby", response_model=List[NearbyVenue])
async def list_nearby_venues(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: Optional[float] = Query(default=None, gt=0, description="Maximum distance in km"),
    db: AsyncSession = Depends(get_db),
):
    """
    List active venues closest first.

    Venues without coordinates are not included.
    """
    return await data_service.get_nearby_venues(db, lat, lng, radius_km)


@router.get("/owner/{owner_id}", response_model=List[VenueInDB])
async def list_owner_venues(owner_id: str):
    """List all venues of an owner, newest first."""
    result = await data_hooks.owner_venues(owner_id)
    return result.data


@router.post("", response_model=VenueInDB, status_code=201)
async def create_venue(
    venue: VenueCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a venue.

    If no coordinates are given, the address is geocoded.

    Args:
        venue: Venue data
        db: Database session

    Returns:
        Created venue
    """
    venue = await _fill_coordinates(venue)

    try:
        created = await data_service.create_venue(db, venue)
    except Exception as e:
        if is_permission_error(e):
            raise HTTPException(status_code=403, detail="Not allowed to create venues")
        raise HTTPException(status_code=500, detail=f"Failed to create venue: {str(e)}")

    data_hooks.invalidate_venues()
    return created


@router.post("/with-courts", status_code=201)
async def create_venue_with_courts(
    payload: VenueWithCourtsCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a venue together with its courts."""
    venue = await _fill_coordinates(payload.venue)
    success = await data_service.create_venue_with_courts(db, venue, payload.courts)
    data_hooks.invalidate_venues()

    if not success:
        raise HTTPException(status_code=500, detail="Failed to create venue with courts")

    return {"success": True}


@router.get("/{venue_id}", response_model=VenueInDB)
async def get_venue(
    venue_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific venue by ID."""
    venue = await data_service.get_venue(db, venue_id)

    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    return venue


@router.patch("/{venue_id}", response_model=VenueInDB)
async def update_venue(
    venue_id: str,
    venue_update: VenueUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Update a venue's information.

    Setting is_active to false hides the venue from players.
    """
    update_data = venue_update.model_dump(exclude_unset=True)

    if not await data_service.update_venue(db, venue_id, update_data):
        if not await data_service.get_venue(db, venue_id):
            raise HTTPException(status_code=404, detail="Venue not found")
        raise HTTPException(status_code=500, detail="Failed to update venue")

    data_hooks.invalidate_venues()
    data_hooks.invalidate_bookings()
    return await data_service.get_venue(db, venue_id)


@router.delete("/{venue_id}", status_code=204)
async def delete_venue(
    venue_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a venue and its courts."""
    if not await data_service.get_venue(db, venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    if not await data_service.delete_venue(db, venue_id):
        raise HTTPException(status_code=500, detail="Failed to delete venue")

    data_hooks.invalidate_venues()
    data_hooks.invalidate_bookings()


@router.post("/{venue_id}/image", response_model=VenueInDB)
async def upload_venue_image(
    venue_id: str,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """Upload a cover image and attach it to the venue."""
    if not await data_service.get_venue(db, venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    content = await file.read()
    url = await data_service.upload_venue_image(
        content, file.content_type or "application/octet-stream", file.filename or "image", venue_id
    )
    if not url:
        raise HTTPException(status_code=502, detail="Image upload failed")

    await data_service.update_venue(db, venue_id, {"image_url": url})
    data_hooks.invalidate_venues()
    return await data_service.get_venue(db, venue_id)
