"""Booking model."""
import enum
from uuid import uuid4
from sqlalchemy import Column, String, ForeignKey, DateTime, Date, Numeric, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class BookingStatus(str, enum.Enum):
    """Lifecycle of a booking row."""

    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Booking(Base):
    """Represents a one-hour reservation of a court by a player."""

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    court_id = Column(String(36), ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    player_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # "HH:MM", one row per hour slot
    price = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default=BookingStatus.ACTIVE.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    venue = relationship("Venue", lazy="selectin")
    court = relationship("Court", lazy="selectin")
    player = relationship("Profile", lazy="selectin")

    __table_args__ = (
        Index("ix_bookings_venue_date", "venue_id", "date"),
        Index("ix_bookings_court_date_start", "court_id", "date", "start_time"),
    )
