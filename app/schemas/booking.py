"""Booking schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from app.models.booking import BookingStatus
from app.schemas.common import TimeSlot


class BookingBase(BaseModel):
    """Base booking schema."""

    venue_id: str
    court_id: str
    player_id: str
    date: date
    start_time: TimeSlot
    price: Decimal = Field(default=Decimal("0"), ge=0)


class BookingCreate(BookingBase):
    """Schema for creating a booking (one hour slot)."""

    status: BookingStatus = BookingStatus.ACTIVE


class BookingStatusUpdate(BaseModel):
    """Schema for a booking status change."""

    status: BookingStatus


class BookingIdList(BaseModel):
    """A set of booking ids acted on together."""

    ids: List[str] = Field(min_length=1)


class BookingInDB(BookingBase):
    """Booking as shown to callers, with denormalized display fields."""

    id: str
    status: BookingStatus
    created_at: Optional[datetime] = None
    venue_name: Optional[str] = None
    court_name: Optional[str] = None
    court_type: Optional[str] = None
    player_name: Optional[str] = None
    player_email: Optional[str] = None
    player_phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookingGroup(BaseModel):
    """Contiguous bookings of one player on one court and day."""

    ids: List[str]
    venue_id: str
    court_id: str
    player_id: str
    venue_name: Optional[str] = None
    court_name: Optional[str] = None
    court_type: Optional[str] = None
    status: BookingStatus
    date: date
    start_time: str
    end_time: str  # may be "24:00"
    price: Decimal
    count: int
    time_range: str


class BulkUpdateResult(BaseModel):
    """Result of acting on several bookings at once."""

    requested: int
    updated: int
