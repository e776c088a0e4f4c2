"""Row adapters.

Map persisted rows into the shapes returned to callers: joined relations
are flattened onto the entity and JSON columns are normalised.
"""
import logging
from typing import Any, Dict, List, Optional

from app.models.booking import Booking
from app.models.court import Court
from app.models.disabled_slot import DisabledSlot
from app.models.venue import Venue
from app.schemas.booking import BookingInDB
from app.schemas.court import CourtInDB
from app.schemas.disabled_slot import DisabledSlotInDB
from app.schemas.venue import VenueInDB

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    if isinstance(value, dict):
        return value
    logger.warning(f"Expected a JSON object, got {type(value).__name__}; dropping value")
    return None


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str):
        # Comma separated text from older rows
        return [item.strip() for item in value.split(",") if item.strip()]
    return []


def court_from_row(court: Court) -> CourtInDB:
    """Convert a court row."""
    return CourtInDB.model_validate(court)


def venue_from_row(venue: Venue) -> VenueInDB:
    """Convert a venue row, keeping its courts in stored order."""
    return VenueInDB(
        id=venue.id,
        owner_id=venue.owner_id,
        name=venue.name,
        address=venue.address,
        image_url=venue.image_url,
        latitude=venue.latitude,
        longitude=venue.longitude,
        opening_hours=_as_dict(venue.opening_hours),
        amenities=_as_list(venue.amenities),
        contact_info=_as_dict(venue.contact_info),
        is_active=bool(venue.is_active),
        created_at=venue.created_at,
        updated_at=venue.updated_at,
        courts=[court_from_row(court) for court in (venue.courts or [])],
    )


def booking_from_row(booking: Booking) -> BookingInDB:
    """Convert a booking row, flattening its venue, court and player."""
    venue = booking.venue
    court = booking.court
    player = booking.player

    return BookingInDB(
        id=booking.id,
        venue_id=booking.venue_id,
        court_id=booking.court_id,
        player_id=booking.player_id,
        date=booking.date,
        start_time=booking.start_time,
        price=booking.price,
        status=booking.status,
        created_at=booking.created_at,
        venue_name=venue.name if venue else None,
        court_name=court.name if court else None,
        court_type=court.type if court else None,
        player_name=player.full_name if player else None,
        player_email=player.email if player else None,
        player_phone=player.phone if player else None,
    )


def disabled_slot_from_row(slot: DisabledSlot) -> DisabledSlotInDB:
    """Convert a disabled slot row."""
    return DisabledSlotInDB.model_validate(slot)
