"""Owner dashboard endpoints."""
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
import pytz
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.schemas.dashboard import DashboardSummary
from app.services.dashboard import build_dashboard
from app.services.data_cache import data_hooks
from app.services.data_service import data_service

router = APIRouter(prefix="/venues/{venue_id}", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    venue_id: str,
    day: Optional[date] = Query(default=None, alias="date", description="Day to summarize (defaults to today)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Daily summary for the venue owner.

    Returns revenue, active bookings and cancellations for the day, growth
    against the previous day, a 7 day revenue series and the day's sport
    distribution.
    """
    venue = await data_service.get_venue(db, venue_id)
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")

    if day is None:
        day = datetime.now(pytz.timezone(settings.BOOKING_TIMEZONE)).date()

    result = await data_hooks.owner_bookings(venue.owner_id)
    bookings = [b for b in result.data if b.venue_id == venue_id]

    return build_dashboard(bookings, day, court_count=len(venue.courts))
