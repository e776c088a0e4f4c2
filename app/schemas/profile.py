"""Profile schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from app.models.profile import UserRole


class ProfileBase(BaseModel):
    """Base profile schema."""

    role: UserRole = UserRole.PLAYER
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ProfileEnsure(ProfileBase):
    """Schema for creating a profile on first authentication."""

    id: str


class ProfileUpdate(BaseModel):
    """Schema for updating a profile."""

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ProfileInDB(ProfileBase):
    """Schema for profile from database."""

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
