"""Disabled slot model."""
from uuid import uuid4
from sqlalchemy import Column, String, ForeignKey, DateTime, Date, Index
from sqlalchemy.sql import func
from app.core.database import Base


class DisabledSlot(Base):
    """Represents an owner-imposed block on a court hour."""

    __tablename__ = "disabled_slots"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    court_id = Column(String(36), ForeignKey("courts.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time_slot = Column(String(5), nullable=False)  # "HH:MM"
    created_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    reason = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # No unique constraint on the tuple: a block exists if any row matches
    __table_args__ = (
        Index("ix_disabled_slots_venue_date", "venue_id", "date"),
        Index("ix_disabled_slots_lookup", "venue_id", "court_id", "date", "time_slot"),
    )
