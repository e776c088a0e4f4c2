"""Venue model."""
from uuid import uuid4
from sqlalchemy import Column, String, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Venue(Base):
    """Represents a facility with one or more courts, run by an owner."""

    __tablename__ = "venues"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    opening_hours = Column(JSON, nullable=True)  # {"monday": {"open": "08:00", "close": "23:00"}, ...}
    amenities = Column(JSON, nullable=True)      # ["parking", "showers", ...]
    contact_info = Column(JSON, nullable=True)   # {"phone": "...", "email": "..."}
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    courts = relationship(
        "Court",
        back_populates="venue",
        cascade="all, delete-orphan",
        order_by="[Court.created_at, Court.id]",
        lazy="selectin",
    )
