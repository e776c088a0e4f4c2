"""Venue schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime

from app.schemas.court import CourtCreate, CourtInDB


class VenueBase(BaseModel):
    """Base venue schema."""

    name: str
    address: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_hours: Optional[Dict[str, Any]] = None
    amenities: List[str] = []
    contact_info: Optional[Dict[str, Any]] = None


class VenueCreate(VenueBase):
    """Schema for creating a venue."""

    owner_id: str


class VenueWithCourtsCreate(BaseModel):
    """Schema for creating a venue together with its courts."""

    venue: VenueCreate
    courts: List[CourtCreate] = []


class VenueUpdate(BaseModel):
    """Schema for updating a venue."""

    name: Optional[str] = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    opening_hours: Optional[Dict[str, Any]] = None
    amenities: Optional[List[str]] = None
    contact_info: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class VenueInDB(VenueBase):
    """Schema for venue from database."""

    id: str
    owner_id: str
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    courts: List[CourtInDB] = []

    model_config = ConfigDict(from_attributes=True)


class NearbyVenue(VenueInDB):
    """Venue annotated with its distance from a point."""

    distance_km: float
