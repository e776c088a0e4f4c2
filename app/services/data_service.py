"""Persistence gateway for venues, courts, bookings, disabled slots and profiles.

Most operations follow the same policy: catch the failure, log it and hand
back a sentinel (None, False or an empty list). Venue creation and court
insertion re-raise so the caller can report the failure.
"""
import logging
import time
from datetime import date, datetime, time as dt_time, timedelta
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.booking import Booking, BookingStatus
from app.models.court import Court
from app.models.disabled_slot import DisabledSlot
from app.models.profile import Profile, UserRole
from app.models.venue import Venue
from app.schemas.booking import BookingCreate, BookingInDB
from app.schemas.court import CourtCreate, CourtInDB
from app.schemas.disabled_slot import DisabledSlotCreate, DisabledSlotInDB
from app.schemas.venue import NearbyVenue, VenueCreate, VenueInDB
from app.services.adapters import (
    booking_from_row,
    court_from_row,
    disabled_slot_from_row,
    venue_from_row,
)
from app.services.geocoding import calculate_distance
from app.services.storage import clean_file_name, storage_service

logger = logging.getLogger(__name__)

PERMISSION_DENIED_SQLSTATE = "42501"

# Allowed status changes; anything else is rejected
STATUS_TRANSITIONS = {
    BookingStatus.ACTIVE.value: {BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value},
}


def is_permission_error(error: Exception) -> bool:
    """Whether a database error is a row-level security / privilege failure."""
    if not isinstance(error, DBAPIError):
        return False
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == PERMISSION_DENIED_SQLSTATE


def _slot_end(booking: Booking) -> datetime:
    hour, minute = (int(part) for part in booking.start_time.split(":"))
    start = datetime.combine(booking.date, dt_time(hour=hour, minute=minute))
    return start + timedelta(hours=1)


class DataService:
    """Gateway between domain operations and the relational store."""

    # ============================================
    # VENUES
    # ============================================

    async def get_venues(self, db: AsyncSession, owner_id: Optional[str] = None) -> List[VenueInDB]:
        """
        List active venues with their courts, ordered by name.

        Args:
            db: Database session
            owner_id: When given, list that owner's venues instead

        Returns:
            List of venues, empty on failure
        """
        if owner_id:
            return await self.get_owner_venues(db, owner_id)

        try:
            result = await db.execute(
                select(Venue)
                .where(Venue.is_active.is_(True))
                .order_by(Venue.name)
                .execution_options(populate_existing=True)
            )
            return [venue_from_row(venue) for venue in result.scalars().all()]
        except Exception as e:
            logger.error(f"Error fetching venues: {e}")
            return []

    async def get_owner_venues(self, db: AsyncSession, owner_id: str) -> List[VenueInDB]:
        """List all venues of an owner, newest first."""
        if not owner_id:
            logger.error("get_owner_venues called without owner_id")
            return []

        try:
            result = await db.execute(
                select(Venue)
                .where(Venue.owner_id == owner_id)
                .order_by(Venue.created_at.desc(), Venue.id)
                .execution_options(populate_existing=True)
            )
            return [venue_from_row(venue) for venue in result.scalars().all()]
        except Exception as e:
            logger.error(f"Error fetching owner venues: {e}")
            return []

    async def get_venue(self, db: AsyncSession, venue_id: str) -> Optional[VenueInDB]:
        """Get a single venue with its courts."""
        try:
            result = await db.execute(
                select(Venue)
                .where(Venue.id == venue_id)
                .execution_options(populate_existing=True)
            )
            venue = result.scalar_one_or_none()
            return venue_from_row(venue) if venue else None
        except Exception as e:
            logger.error(f"Error fetching venue {venue_id}: {e}")
            return None

    async def get_nearby_venues(
        self,
        db: AsyncSession,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None,
    ) -> List[NearbyVenue]:
        """
        List active venues sorted by distance from a point.

        Venues without coordinates are skipped.

        Args:
            db: Database session
            latitude: Latitude of the point
            longitude: Longitude of the point
            radius_km: Optional maximum distance

        Returns:
            Venues annotated with distance_km, closest first
        """
        venues = await self.get_venues(db)

        nearby = []
        for venue in venues:
            if venue.latitude is None or venue.longitude is None:
                continue
            distance = calculate_distance(latitude, longitude, venue.latitude, venue.longitude)
            if radius_km is not None and distance > radius_km:
                continue
            nearby.append(NearbyVenue(**venue.model_dump(), distance_km=round(distance, 2)))

        nearby.sort(key=lambda v: v.distance_km)
        return nearby

    async def create_venue(self, db: AsyncSession, venue: VenueCreate) -> VenueInDB:
        """
        Create a venue.

        Raises:
            Exception: Any store failure is logged and re-raised
        """
        try:
            logger.info(f"Creating venue '{venue.name}' for owner {venue.owner_id}")

            db_venue = Venue(
                owner_id=venue.owner_id,
                name=venue.name,
                address=venue.address,
                image_url=venue.image_url,
                opening_hours=venue.opening_hours,
                amenities=venue.amenities,
                contact_info=venue.contact_info,
                latitude=venue.latitude,
                longitude=venue.longitude,
                is_active=True,
            )
            db.add(db_venue)
            await db.commit()

            result = await db.execute(
                select(Venue)
                .where(Venue.id == db_venue.id)
                .execution_options(populate_existing=True)
            )
            created = venue_from_row(result.scalar_one())
            logger.info(f"Venue created: {created.id}")
            return created

        except Exception as e:
            await db.rollback()
            logger.error(f"Error creating venue: {e}")
            if is_permission_error(e):
                logger.error("Permission denied by row-level security while creating venue")
            raise

    async def create_venue_with_courts(
        self, db: AsyncSession, venue: VenueCreate, courts: List[CourtCreate]
    ) -> bool:
        """Create a venue and then its courts. Never raises."""
        try:
            created = await self.create_venue(db, venue)

            if courts:
                logger.info(f"Adding {len(courts)} courts to venue {created.id}")
                await self.add_courts(db, created.id, courts)

            return True
        except Exception as e:
            logger.error(f"Error in create_venue_with_courts: {e}")
            return False

    async def update_venue(self, db: AsyncSession, venue_id: str, updates: Dict[str, Any]) -> bool:
        """Apply field updates to a venue."""
        try:
            venue = await db.get(Venue, venue_id)
            if not venue:
                logger.warning(f"Venue {venue_id} not found for update")
                return False

            for field, value in updates.items():
                setattr(venue, field, value)

            await db.commit()
            await db.refresh(venue)
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error updating venue {venue_id}: {e}")
            return False

    async def delete_venue(self, db: AsyncSession, venue_id: str) -> bool:
        """Delete a venue and its courts."""
        try:
            venue = await db.get(Venue, venue_id)
            if not venue:
                return False

            await db.delete(venue)
            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting venue {venue_id}: {e}")
            return False

    # ============================================
    # COURTS
    # ============================================

    async def add_courts(
        self, db: AsyncSession, venue_id: str, courts: List[CourtCreate]
    ) -> List[CourtInDB]:
        """
        Insert courts for a venue, uploading their images first.

        A failed image upload keeps the court without an image.

        Raises:
            Exception: Insert failures are logged and re-raised
        """
        try:
            rows = []
            for index, court in enumerate(courts):
                logger.info(f"Processing court {index + 1}/{len(courts)}: {court.name}")

                image_url = court.image_url or ""
                if court.image is not None:
                    path = f"courts/{venue_id}/{int(time.time() * 1000)}_{clean_file_name(court.image.file_name)}"
                    uploaded_url = await storage_service.upload_image(
                        court.image.content, court.image.content_type, "venue-images", path
                    )
                    if uploaded_url:
                        image_url = uploaded_url
                    else:
                        logger.warning(f"Image upload failed for court {court.name}, saving without image")

                rows.append(
                    Court(
                        venue_id=venue_id,
                        name=court.name,
                        type=court.type,
                        price_per_hour=court.price_per_hour,
                        is_active=court.is_active,
                        image_url=image_url,
                    )
                )

            db.add_all(rows)
            await db.commit()
            for row in rows:
                await db.refresh(row)
            logger.info(f"Inserted {len(rows)} courts into venue {venue_id}")
            return [court_from_row(row) for row in rows]

        except Exception as e:
            await db.rollback()
            logger.error(f"Error adding courts: {e}")
            raise

    async def update_court(self, db: AsyncSession, court_id: str, updates: Dict[str, Any]) -> bool:
        """Apply field updates to a court."""
        try:
            court = await db.get(Court, court_id)
            if not court:
                logger.warning(f"Court {court_id} not found for update")
                return False

            for field, value in updates.items():
                setattr(court, field, value)

            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error updating court {court_id}: {e}")
            return False

    async def delete_court(self, db: AsyncSession, court_id: str) -> bool:
        """Delete a court."""
        try:
            court = await db.get(Court, court_id)
            if not court:
                return False

            await db.delete(court)
            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting court {court_id}: {e}")
            return False

    async def upload_court_image(
        self, content: bytes, content_type: str, file_name: str, court_id: str
    ) -> Optional[str]:
        """Upload a court image and return its public URL."""
        path = f"courts/{court_id}_{int(time.time() * 1000)}_{clean_file_name(file_name)}"
        return await storage_service.upload_image(content, content_type, "venue-images", path)

    async def upload_venue_image(
        self, content: bytes, content_type: str, file_name: str, venue_id: str
    ) -> Optional[str]:
        """Upload a venue cover image and return its public URL."""
        path = f"venues/{venue_id}/{int(time.time() * 1000)}_{clean_file_name(file_name)}"
        return await storage_service.upload_image(content, content_type, "venue-images", path)

    # ============================================
    # BOOKINGS
    # ============================================

    async def get_bookings(
        self,
        db: AsyncSession,
        owner_id: Optional[str] = None,
        player_id: Optional[str] = None,
    ) -> List[BookingInDB]:
        """
        List bookings with venue, court and player details, newest date first.

        Args:
            db: Database session
            owner_id: Only bookings at this owner's venues
            player_id: Only this player's bookings

        Returns:
            List of bookings, empty on failure
        """
        try:
            query = select(Booking)
            if owner_id:
                query = query.join(Venue, Booking.venue_id == Venue.id).where(Venue.owner_id == owner_id)
            if player_id:
                query = query.where(Booking.player_id == player_id)

            result = await db.execute(
                query.order_by(Booking.date.desc(), Booking.start_time)
            )
            return [booking_from_row(booking) for booking in result.scalars().all()]
        except Exception as e:
            logger.error(f"Error fetching bookings: {e}")
            return []

    async def get_venue_bookings(
        self, db: AsyncSession, venue_id: str, target_date: date
    ) -> List[BookingInDB]:
        """List a venue's bookings for one day, ordered by start time."""
        try:
            result = await db.execute(
                select(Booking)
                .where(and_(Booking.venue_id == venue_id, Booking.date == target_date))
                .order_by(Booking.start_time)
            )
            return [booking_from_row(booking) for booking in result.scalars().all()]
        except Exception as e:
            logger.error(f"Error fetching bookings for venue {venue_id} on {target_date}: {e}")
            return []

    async def get_booking(self, db: AsyncSession, booking_id: str) -> Optional[BookingInDB]:
        """Get a single booking."""
        try:
            booking = await db.get(Booking, booking_id)
            return booking_from_row(booking) if booking else None
        except Exception as e:
            logger.error(f"Error fetching booking {booking_id}: {e}")
            return None

    async def is_slot_taken(
        self, db: AsyncSession, venue_id: str, court_id: str, target_date: date, time_slot: str
    ) -> bool:
        """Whether the slot is blocked by the owner or held by an active booking."""
        blocked = await db.execute(
            select(DisabledSlot.id).where(
                and_(
                    DisabledSlot.venue_id == venue_id,
                    DisabledSlot.court_id == court_id,
                    DisabledSlot.date == target_date,
                    DisabledSlot.time_slot == time_slot,
                )
            )
        )
        if blocked.scalars().first() is not None:
            return True

        booked = await db.execute(
            select(Booking.id).where(
                and_(
                    Booking.court_id == court_id,
                    Booking.date == target_date,
                    Booking.start_time == time_slot,
                    Booking.status == BookingStatus.ACTIVE.value,
                )
            )
        )
        return booked.scalars().first() is not None

    async def create_booking(self, db: AsyncSession, booking: BookingCreate) -> Optional[BookingInDB]:
        """
        Create a one-hour booking.

        Returns:
            The booking, or None if the slot is taken or the insert failed
        """
        try:
            if await self.is_slot_taken(
                db, booking.venue_id, booking.court_id, booking.date, booking.start_time
            ):
                logger.warning(
                    f"Slot {booking.date} {booking.start_time} on court {booking.court_id} is not available"
                )
                return None

            db_booking = Booking(
                venue_id=booking.venue_id,
                court_id=booking.court_id,
                player_id=booking.player_id,
                date=booking.date,
                start_time=booking.start_time,
                price=booking.price,
                status=booking.status.value,
            )
            db.add(db_booking)
            await db.commit()

            result = await db.execute(
                select(Booking)
                .where(Booking.id == db_booking.id)
                .execution_options(populate_existing=True)
            )
            return booking_from_row(result.scalar_one())
        except Exception as e:
            await db.rollback()
            logger.error(f"Error creating booking: {e}")
            return None

    async def update_booking_status(
        self, db: AsyncSession, booking_id: str, status: BookingStatus
    ) -> bool:
        """
        Move a booking to a new status.

        Only ACTIVE -> CANCELLED and ACTIVE -> COMPLETED are allowed; setting
        the current status again is a no-op success.
        """
        status = BookingStatus(status).value
        try:
            booking = await db.get(Booking, booking_id)
            if not booking:
                logger.warning(f"Booking {booking_id} not found")
                return False

            if booking.status == status:
                return True

            if status not in STATUS_TRANSITIONS.get(booking.status, set()):
                logger.warning(f"Illegal status change for booking {booking_id}: {booking.status} -> {status}")
                return False

            booking.status = status
            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error updating booking status: {e}")
            return False

    async def cancel_booking(self, db: AsyncSession, booking_id: str) -> bool:
        """Cancel a booking."""
        return await self.update_booking_status(db, booking_id, BookingStatus.CANCELLED)

    async def delete_booking(self, db: AsyncSession, booking_id: str) -> bool:
        """Delete a booking. Only cancelled bookings can be deleted."""
        try:
            booking = await db.get(Booking, booking_id)
            if not booking:
                return False

            if booking.status != BookingStatus.CANCELLED.value:
                logger.warning(f"Refusing to delete booking {booking_id} with status {booking.status}")
                return False

            await db.delete(booking)
            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting booking: {e}")
            return False

    async def cancel_or_delete_bookings(self, db: AsyncSession, booking_ids: Iterable[str]) -> int:
        """
        Cancel a reservation group.

        Bookings that are already cancelled are deleted, the rest are
        cancelled. Each row is decided on the status it had before this
        call; repeated ids are acted on once. Unknown ids count as failures.

        Returns:
            Number of bookings updated
        """
        booking_ids = list(dict.fromkeys(booking_ids))
        try:
            result = await db.execute(select(Booking.id, Booking.status).where(Booking.id.in_(booking_ids)))
            statuses = {row.id: row.status for row in result.all()}
        except Exception as e:
            logger.error(f"Error loading bookings for group cancel: {e}")
            return 0

        updated = 0
        for booking_id in booking_ids:
            status = statuses.get(booking_id)
            if status is None:
                continue

            if status == BookingStatus.CANCELLED.value:
                ok = await self.delete_booking(db, booking_id)
            else:
                ok = await self.cancel_booking(db, booking_id)

            if ok:
                updated += 1

        return updated

    async def complete_past_bookings(self, db: AsyncSession, now: datetime) -> int:
        """
        Mark active bookings whose hour has ended as completed.

        Args:
            db: Database session
            now: Current local time (naive, in the bookings' timezone)

        Returns:
            Number of bookings completed
        """
        try:
            result = await db.execute(
                select(Booking).where(
                    and_(
                        Booking.status == BookingStatus.ACTIVE.value,
                        Booking.date <= now.date(),
                    )
                )
            )
            completed = 0
            for booking in result.scalars().all():
                if _slot_end(booking) <= now:
                    booking.status = BookingStatus.COMPLETED.value
                    completed += 1

            if completed:
                await db.commit()
            return completed
        except Exception as e:
            await db.rollback()
            logger.error(f"Error completing past bookings: {e}")
            return 0

    # ============================================
    # DISABLED SLOTS
    # ============================================

    async def get_disabled_slots(
        self, db: AsyncSession, venue_id: str, target_date: date
    ) -> List[DisabledSlotInDB]:
        """List a venue's blocked slots for one day."""
        try:
            result = await db.execute(
                select(DisabledSlot).where(
                    and_(DisabledSlot.venue_id == venue_id, DisabledSlot.date == target_date)
                )
            )
            return [disabled_slot_from_row(slot) for slot in result.scalars().all()]
        except Exception as e:
            logger.error(f"Error fetching disabled slots: {e}")
            return []

    async def create_disabled_slot(
        self, db: AsyncSession, slot: DisabledSlotCreate
    ) -> Optional[DisabledSlotInDB]:
        """Block a slot."""
        try:
            db_slot = DisabledSlot(**slot.model_dump())
            db.add(db_slot)
            await db.commit()
            await db.refresh(db_slot)
            return disabled_slot_from_row(db_slot)
        except Exception as e:
            await db.rollback()
            logger.error(f"Error creating disabled slot: {e}")
            return None

    async def delete_disabled_slot(self, db: AsyncSession, slot_id: str) -> bool:
        """Remove a block."""
        try:
            slot = await db.get(DisabledSlot, slot_id)
            if not slot:
                return False

            await db.delete(slot)
            await db.commit()
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting disabled slot: {e}")
            return False

    async def toggle_slot_availability(
        self,
        db: AsyncSession,
        venue_id: str,
        court_id: str,
        target_date: date,
        time_slot: str,
        user_id: str,
        reason: Optional[str] = None,
    ) -> bool:
        """
        Block a free slot or re-enable a blocked one.

        The existence check and the write are separate statements with no
        lock; two concurrent toggles on the same slot can race.

        Returns:
            True if the slot changed state, False on any failure
        """
        try:
            result = await db.execute(
                select(DisabledSlot.id).where(
                    and_(
                        DisabledSlot.venue_id == venue_id,
                        DisabledSlot.court_id == court_id,
                        DisabledSlot.date == target_date,
                        DisabledSlot.time_slot == time_slot,
                    )
                )
            )
            existing_id = result.scalars().first()

            if existing_id:
                logger.info(f"Slot blocked ({existing_id}). Re-enabling...")
                return await self.delete_disabled_slot(db, existing_id)

            logger.info(f"Slot free. Disabling {target_date} {time_slot} on court {court_id}...")
            created = await self.create_disabled_slot(
                db,
                DisabledSlotCreate(
                    venue_id=venue_id,
                    court_id=court_id,
                    date=target_date,
                    time_slot=time_slot,
                    created_by=user_id,
                    reason=reason or settings.DEFAULT_DISABLE_REASON,
                ),
            )
            return created is not None
        except Exception as e:
            logger.error(f"Error toggling slot: {e}")
            return False

    # ============================================
    # PROFILES
    # ============================================

    async def get_user_profile(self, db: AsyncSession, user_id: str) -> Optional[Profile]:
        """Get a profile; a missing row is not an error."""
        try:
            return await db.get(Profile, user_id)
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            return None

    async def ensure_profile(
        self,
        db: AsyncSession,
        user_id: str,
        email: Optional[str] = None,
        role: UserRole = UserRole.PLAYER,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Optional[Profile]:
        """Return the user's profile, creating it on first authentication."""
        profile = await self.get_user_profile(db, user_id)
        if profile:
            return profile

        try:
            profile = Profile(
                id=user_id,
                role=UserRole(role).value,
                email=email,
                full_name=full_name,
                phone=phone,
            )
            db.add(profile)
            await db.commit()
            await db.refresh(profile)
            logger.info(f"Created {profile.role} profile for {user_id}")
            return profile
        except Exception as e:
            await db.rollback()
            logger.error(f"Error creating profile {user_id}: {e}")
            return None

    async def update_user_profile(self, db: AsyncSession, user_id: str, updates: Dict[str, Any]) -> bool:
        """Apply field updates to a profile."""
        try:
            profile = await db.get(Profile, user_id)
            if not profile:
                logger.warning(f"Profile {user_id} not found for update")
                return False

            for field, value in updates.items():
                setattr(profile, field, value)

            await db.commit()
            await db.refresh(profile)
            return True
        except Exception as e:
            await db.rollback()
            logger.error(f"Error updating profile: {e}")
            return False


# Singleton instance
data_service = DataService()
