"""Geocoding client and distance helpers.

Addresses are resolved with Nominatim (OpenStreetMap). The service is free
and needs no API key, but it requires a descriptive User-Agent and has a
strict usage policy, so callers must not assume it is available.
"""
import logging
import math
from typing import Optional

import httpx

from app.core.config import settings
from app.schemas.geocoding import Coordinates

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Returns:
        Distance in kilometers
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class GeocodingClient:
    """Client for the Nominatim search endpoint."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the geocoding client."""
        self.base_url = settings.NOMINATIM_BASE_URL
        self.user_agent = settings.NOMINATIM_USER_AGENT
        self.timeout = settings.GEOCODING_TIMEOUT_SECONDS
        self._transport = transport

    async def geocode_address(self, address: str) -> Optional[Coordinates]:
        """
        Convert an address to coordinates.

        Args:
            address: Free-form address

        Returns:
            Coordinates of the first match, or None on no match or error
        """
        address = (address or "").strip()
        if not address:
            return None

        params = {"format": "json", "q": address, "limit": "1"}
        headers = {"User-Agent": self.user_agent}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/search",
                    params=params,
                    headers=headers,
                    timeout=self.timeout,
                )

            if response.status_code != 200:
                logger.error(f"Geocoding failed: {response.status_code} {response.reason_phrase}")
                return None

            data = response.json()
            if data:
                return Coordinates(lat=float(data[0]["lat"]), lng=float(data[0]["lon"]))

            logger.warning(f"No coordinates found for address: {address}")
            return None

        except Exception as e:
            logger.error(f"Geocoding error for '{address}': {e}")
            return None


# Singleton instance
geocoding_client = GeocodingClient()
