"""Owner dashboard aggregation."""
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List

from app.models.booking import BookingStatus
from app.schemas.booking import BookingInDB
from app.schemas.dashboard import DashboardSummary, RevenuePoint, SportShare

logger = logging.getLogger(__name__)

REVENUE_STATUSES = (BookingStatus.ACTIVE, BookingStatus.COMPLETED)
SERIES_DAYS = 7


def _revenue(bookings: List[BookingInDB], day: date) -> Decimal:
    return sum(
        (b.price for b in bookings if b.date == day and b.status in REVENUE_STATUSES),
        Decimal("0"),
    )


def revenue_growth(current: Decimal, previous: Decimal) -> float:
    """
    Day-over-day growth in percent.

    A previous day with no revenue always reports 100, even when the
    current day has none either.
    """
    if previous == 0:
        return 100.0
    return float((current - previous) / previous * 100)


def sport_category(court_name: str) -> str:
    """Sport of a court, guessed from its name."""
    return "Beach Tennis" if "Beach" in (court_name or "") else "Padel"


def build_dashboard(
    bookings: Iterable[BookingInDB], selected_date: date, court_count: int = 0
) -> DashboardSummary:
    """
    Summarize a venue's bookings for one day.

    Args:
        bookings: All bookings of the venue (any date, any status)
        selected_date: Day to summarize
        court_count: Number of courts, passed through for display

    Returns:
        DashboardSummary with daily totals, a 7 day revenue series ending on
        the selected date and the day's sport distribution
    """
    bookings = list(bookings)

    daily = [b for b in bookings if b.date == selected_date]
    daily_active = [b for b in daily if b.status in REVENUE_STATUSES]

    revenue = _revenue(bookings, selected_date)
    previous_revenue = _revenue(bookings, selected_date - timedelta(days=1))

    series = []
    for offset in range(SERIES_DAYS - 1, -1, -1):
        day = selected_date - timedelta(days=offset)
        series.append(RevenuePoint(date=day, revenue=_revenue(bookings, day)))

    distribution: List[SportShare] = []
    for booking in daily_active:
        sport = sport_category(booking.court_name)
        share = next((s for s in distribution if s.name == sport), None)
        if share:
            share.value += 1
        else:
            distribution.append(SportShare(name=sport, value=1))

    logger.debug(f"Dashboard for {selected_date}: {len(daily)} bookings, revenue {revenue}")

    return DashboardSummary(
        date=selected_date,
        revenue=revenue,
        previous_revenue=previous_revenue,
        revenue_growth=round(revenue_growth(revenue, previous_revenue), 2),
        active_bookings=len(daily_active),
        cancellations=sum(1 for b in daily if b.status == BookingStatus.CANCELLED),
        court_count=court_count,
        revenue_series=series,
        sport_distribution=distribution,
    )
