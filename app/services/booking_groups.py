"""Collapse per-hour booking rows into reservation groups for display."""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from app.schemas.booking import BookingGroup, BookingInDB


def end_time_for(start_time: str) -> str:
    """
    Display end time of a one-hour slot.

    The hour is not wrapped: "23:00" ends at "24:00".
    """
    last_hour = int(start_time.split(":")[0])
    return f"{last_hour + 1:02d}:00"


def group_bookings(bookings: Iterable[BookingInDB]) -> List[BookingGroup]:
    """
    Group bookings by venue, court, date, status and player.

    Members of a group are ordered by start time. Groups are returned with
    the most recent date first, then by start time.
    """
    groups: Dict[Tuple, List[BookingInDB]] = defaultdict(list)
    for booking in bookings:
        key = (booking.venue_id, booking.court_id, booking.date, booking.status, booking.player_id)
        groups[key].append(booking)

    result = []
    for members in groups.values():
        members = sorted(members, key=lambda b: b.start_time)
        first = members[0]
        end_time = end_time_for(members[-1].start_time)

        result.append(
            BookingGroup(
                ids=[b.id for b in members],
                venue_id=first.venue_id,
                court_id=first.court_id,
                player_id=first.player_id,
                venue_name=first.venue_name,
                court_name=first.court_name,
                court_type=first.court_type,
                status=first.status,
                date=first.date,
                start_time=first.start_time,
                end_time=end_time,
                price=sum((b.price for b in members), Decimal("0")),
                count=len(members),
                time_range=f"{first.start_time[:5]} - {end_time}",
            )
        )

    # Stable sorts: start time ascending, then date descending
    result.sort(key=lambda g: g.start_time)
    result.sort(key=lambda g: g.date, reverse=True)
    return result
