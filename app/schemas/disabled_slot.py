"""Disabled slot schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime, date

from app.schemas.common import TimeSlot


class DisabledSlotBase(BaseModel):
    """Base disabled slot schema."""

    venue_id: str
    court_id: str
    date: date
    time_slot: TimeSlot
    created_by: Optional[str] = None
    reason: Optional[str] = None


class DisabledSlotCreate(DisabledSlotBase):
    """Schema for creating a disabled slot."""

    pass


class DisabledSlotInDB(DisabledSlotBase):
    """Schema for disabled slot from database."""

    id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SlotToggleRequest(BaseModel):
    """Schema for toggling a court hour between blocked and bookable."""

    court_id: str
    date: date
    time_slot: TimeSlot
    user_id: str
    reason: Optional[str] = None


class SlotToggleResponse(BaseModel):
    """Schema for a toggle result."""

    success: bool
