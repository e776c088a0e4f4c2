"""Booking endpoints."""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.booking import (
    BookingCreate,
    BookingGroup,
    BookingIdList,
    BookingInDB,
    BookingStatusUpdate,
    BulkUpdateResult,
)
from app.services.booking_groups import group_bookings
from app.services.data_cache import data_hooks
from app.services.data_service import data_service

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=List[BookingInDB])
async def list_bookings(
    owner_id: Optional[str] = Query(default=None, description="Only bookings at this owner's venues"),
    player_id: Optional[str] = Query(default=None, description="Only this player's bookings"),
):
    """
    List bookings, most recent date first.

    Owners see the bookings of their venues, players see their own.
    """
    if owner_id:
        result = await data_hooks.owner_bookings(owner_id)
    elif player_id:
        result = await data_hooks.player_bookings(player_id)
    else:
        result = await data_hooks.bookings()
    return result.data


@router.get("/groups", response_model=List[BookingGroup])
async def list_booking_groups(
    player_id: str = Query(..., description="Player whose reservations to show"),
):
    """
    List a player's reservations.

    Consecutive hours on the same court and day are shown as one group.
    """
    result = await data_hooks.player_bookings(player_id)
    return group_bookings(result.data)


@router.get("/venue/{venue_id}", response_model=List[BookingInDB])
async def list_venue_bookings(
    venue_id: str,
    day: date = Query(..., alias="date", description="Day to list"),
    db: AsyncSession = Depends(get_db),
):
    """List a venue's bookings for one day, ordered by start time."""
    return await data_service.get_venue_bookings(db, venue_id, day)


@router.post("", response_model=BookingInDB, status_code=201)
async def create_booking(
    booking: BookingCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Book one hour on a court.

    Fails with 409 when the hour is blocked by the owner or already booked.
    """
    if await data_service.is_slot_taken(
        db, booking.venue_id, booking.court_id, booking.date, booking.start_time
    ):
        raise HTTPException(status_code=409, detail="Slot is not available")

    created = await data_service.create_booking(db, booking)
    if not created:
        raise HTTPException(status_code=500, detail="Failed to create booking")

    data_hooks.invalidate_bookings()
    return created


@router.patch("/{booking_id}/status", response_model=BookingInDB)
async def update_booking_status(
    booking_id: str,
    status_update: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Change a booking's status (ACTIVE to CANCELLED or COMPLETED)."""
    booking = await data_service.get_booking(db, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    if not await data_service.update_booking_status(db, booking_id, status_update.status):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change booking from {booking.status.value} to {status_update.status.value}",
        )

    data_hooks.invalidate_bookings()
    return await data_service.get_booking(db, booking_id)


@router.post("/{booking_id}/cancel", response_model=BookingInDB)
async def cancel_booking(
    booking_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking."""
    if not await data_service.get_booking(db, booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")

    if not await data_service.cancel_booking(db, booking_id):
        raise HTTPException(status_code=400, detail="Booking cannot be cancelled")

    data_hooks.invalidate_bookings()
    return await data_service.get_booking(db, booking_id)


@router.post("/cancel-group", response_model=BulkUpdateResult)
async def cancel_booking_group(
    payload: BookingIdList,
    db: AsyncSession = Depends(get_db),
):
    """
    Cancel a reservation group.

    Bookings already cancelled are removed, the others are cancelled.
    """
    updated = await data_service.cancel_or_delete_bookings(db, payload.ids)
    if updated:
        data_hooks.invalidate_bookings()

    return BulkUpdateResult(requested=len(payload.ids), updated=updated)


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a cancelled booking."""
    if not await data_service.get_booking(db, booking_id):
        raise HTTPException(status_code=404, detail="Booking not found")

    if not await data_service.delete_booking(db, booking_id):
        raise HTTPException(status_code=400, detail="Only cancelled bookings can be deleted")

    data_hooks.invalidate_bookings()
