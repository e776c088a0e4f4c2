"""Court endpoints."""
from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.court import Court
from app.schemas.court import CourtCreate, CourtInDB, CourtUpdate
from app.services.adapters import court_from_row
from app.services.data_cache import data_hooks
from app.services.data_service import data_service

router = APIRouter(tags=["courts"])


@router.post("/venues/{venue_id}/courts", response_model=List[CourtInDB], status_code=201)
async def add_courts(
    venue_id: str,
    courts: List[CourtCreate],
    db: AsyncSession = Depends(get_db),
):
    """
    Add courts to a venue.

    Courts may carry a base64 image; if its upload fails the court is saved
    without an image.

    Args:
        venue_id: Venue ID
        courts: Courts to add
        db: Database session

    Returns:
        Created courts
    """
    if not await data_service.get_venue(db, venue_id):
        raise HTTPException(status_code=404, detail="Venue not found")

    try:
        created = await data_service.add_courts(db, venue_id, courts)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to add courts: {str(e)}")

    data_hooks.invalidate_venues()
    return created


@router.patch("/courts/{court_id}", response_model=CourtInDB)
async def update_court(
    court_id: str,
    court_update: CourtUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a court."""
    if not await db.get(Court, court_id):
        raise HTTPException(status_code=404, detail="Court not found")

    update_data = court_update.model_dump(exclude_unset=True)
    if not await data_service.update_court(db, court_id, update_data):
        raise HTTPException(status_code=500, detail="Failed to update court")

    data_hooks.invalidate_venues()
    data_hooks.invalidate_bookings()
    return court_from_row(await db.get(Court, court_id))


@router.delete("/courts/{court_id}", status_code=204)
async def delete_court(
    court_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a court."""
    if not await db.get(Court, court_id):
        raise HTTPException(status_code=404, detail="Court not found")

    if not await data_service.delete_court(db, court_id):
        raise HTTPException(status_code=500, detail="Failed to delete court")

    data_hooks.invalidate_venues()
    data_hooks.invalidate_bookings()


@router.post("/courts/{court_id}/image", response_model=CourtInDB)
async def upload_court_image(
    court_id: str,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """Upload a court image and attach it to the court."""
    if not await db.get(Court, court_id):
        raise HTTPException(status_code=404, detail="Court not found")

    content = await file.read()
    url = await data_service.upload_court_image(
        content, file.content_type or "application/octet-stream", file.filename or "image", court_id
    )
    if not url:
        raise HTTPException(status_code=502, detail="Image upload failed")

    await data_service.update_court(db, court_id, {"image_url": url})
    data_hooks.invalidate_venues()
    return court_from_row(await db.get(Court, court_id))
