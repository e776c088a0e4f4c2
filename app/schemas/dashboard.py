"""Owner dashboard schemas."""
from pydantic import BaseModel
from typing import List
from datetime import date
from decimal import Decimal


class RevenuePoint(BaseModel):
    """Revenue for one day of the chart series."""

    date: date
    revenue: Decimal


class SportShare(BaseModel):
    """Number of bookings in one sport category."""

    name: str
    value: int


class DashboardSummary(BaseModel):
    """Daily summary for a venue owner."""

    date: date
    revenue: Decimal
    previous_revenue: Decimal
    revenue_growth: float
    active_bookings: int
    cancellations: int
    court_count: int = 0
    revenue_series: List[RevenuePoint]
    sport_distribution: List[SportShare]
