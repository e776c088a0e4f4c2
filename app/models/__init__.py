"""Database models."""
from app.models.profile import Profile, UserRole
from app.models.venue import Venue
from app.models.court import Court
from app.models.booking import Booking, BookingStatus
from app.models.disabled_slot import DisabledSlot

__all__ = [
    "Profile",
    "UserRole",
    "Venue",
    "Court",
    "Booking",
    "BookingStatus",
    "DisabledSlot",
]
