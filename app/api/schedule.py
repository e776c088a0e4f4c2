"""Schedule endpoints: owner blocks on court hours."""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.disabled_slot import DisabledSlotInDB, SlotToggleRequest, SlotToggleResponse
from app.services.data_cache import data_hooks
from app.services.data_service import data_service

router = APIRouter(tags=["schedule"])


@router.get("/venues/{venue_id}/disabled-slots", response_model=List[DisabledSlotInDB])
async def list_disabled_slots(
    venue_id: str,
    day: date = Query(..., alias="date", description="Day to list"),
):
    """List the blocked hours of a venue on one day."""
    result = await data_hooks.disabled_slots(venue_id, day)
    return result.data


@router.post("/venues/{venue_id}/disabled-slots/toggle", response_model=SlotToggleResponse)
async def toggle_slot(
    venue_id: str,
    request: SlotToggleRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Block a free hour or re-enable a blocked one.

    Args:
        venue_id: Venue ID
        request: Court, date, hour, acting user and optional reason
        db: Database session

    Returns:
        Toggle result
    """
    success = await data_service.toggle_slot_availability(
        db,
        venue_id,
        request.court_id,
        request.date,
        request.time_slot,
        request.user_id,
        request.reason,
    )

    if not success:
        raise HTTPException(status_code=500, detail="Failed to update the schedule")

    data_hooks.invalidate_disabled_slots(venue_id, request.date)
    return SlotToggleResponse(success=True)


@router.delete("/disabled-slots/{slot_id}", status_code=204)
async def delete_disabled_slot(
    slot_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Remove a block by ID."""
    if not await data_service.delete_disabled_slot(db, slot_id):
        raise HTTPException(status_code=404, detail="Disabled slot not found")

    data_hooks.cache.mutate_kind("disabledSlots")
