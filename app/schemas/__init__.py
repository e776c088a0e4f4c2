"""API schemas."""
from app.schemas.profile import ProfileEnsure, ProfileUpdate, ProfileInDB
from app.schemas.court import CourtCreate, CourtUpdate, CourtInDB, ImagePayload
from app.schemas.venue import (
    VenueCreate,
    VenueUpdate,
    VenueInDB,
    VenueWithCourtsCreate,
    NearbyVenue,
)
from app.schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingIdList,
    BookingInDB,
    BookingGroup,
    BulkUpdateResult,
)
from app.schemas.disabled_slot import (
    DisabledSlotCreate,
    DisabledSlotInDB,
    SlotToggleRequest,
    SlotToggleResponse,
)
from app.schemas.dashboard import DashboardSummary, RevenuePoint, SportShare
from app.schemas.geocoding import Coordinates, GeocodingResult, DistanceResult
from app.schemas.auth import PasswordResetRequest, PasswordUpdateRequest, PasswordResult

__all__ = [
    "ProfileEnsure",
    "ProfileUpdate",
    "ProfileInDB",
    "CourtCreate",
    "CourtUpdate",
    "CourtInDB",
    "ImagePayload",
    "VenueCreate",
    "VenueUpdate",
    "VenueInDB",
    "VenueWithCourtsCreate",
    "NearbyVenue",
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingIdList",
    "BookingInDB",
    "BookingGroup",
    "BulkUpdateResult",
    "DisabledSlotCreate",
    "DisabledSlotInDB",
    "SlotToggleRequest",
    "SlotToggleResponse",
    "DashboardSummary",
    "RevenuePoint",
    "SportShare",
    "Coordinates",
    "GeocodingResult",
    "DistanceResult",
    "PasswordResetRequest",
    "PasswordUpdateRequest",
    "PasswordResult",
]
