"""Court schemas."""
from pydantic import Base64Bytes, BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ImagePayload(BaseModel):
    """An image file to upload along with a court."""

    file_name: str
    content_type: str = "image/jpeg"
    content: Base64Bytes  # base64 in JSON payloads


class CourtBase(BaseModel):
    """Base court schema."""

    name: str
    type: Optional[str] = None
    price_per_hour: Decimal = Field(default=Decimal("0"), ge=0)
    is_active: bool = True
    image_url: Optional[str] = None


class CourtCreate(CourtBase):
    """Schema for creating a court."""

    image: Optional[ImagePayload] = None


class CourtUpdate(BaseModel):
    """Schema for updating a court."""

    name: Optional[str] = None
    type: Optional[str] = None
    price_per_hour: Optional[Decimal] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    image_url: Optional[str] = None


class CourtInDB(CourtBase):
    """Schema for court from database."""

    id: str
    venue_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
