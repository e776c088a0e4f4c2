"""Court model."""
from uuid import uuid4
from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base


class Court(Base):
    """Represents a single bookable playing surface within a venue."""

    __tablename__ = "courts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    venue_id = Column(String(36), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=True)  # e.g., "padel", "beach tennis"
    price_per_hour = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    venue = relationship("Venue", back_populates="courts")
