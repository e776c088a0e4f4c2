"""Shared schema types."""
import logging
from typing import Annotated

from pydantic import BeforeValidator

logger = logging.getLogger(__name__)


def normalize_time_slot(value) -> str:
    """
    Normalize a time of day to a zero-padded "HH:MM" string.

    Accepts "9", "9:00", "09:00:00" and datetime.time-like objects.

    Raises:
        ValueError: If the value is not a valid time of day
    """
    if hasattr(value, "hour") and hasattr(value, "minute"):
        return f"{value.hour:02d}:{value.minute:02d}"

    time_str = str(value).strip()
    try:
        if ":" in time_str:
            parts = time_str.split(":")
            hour = int(parts[0])
            minute = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        else:
            # Assume it's just hours
            hour = int(time_str)
            minute = 0
    except ValueError:
        raise ValueError(f"Invalid time slot '{value}'")

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time slot '{value}'")

    return f"{hour:02d}:{minute:02d}"


TimeSlot = Annotated[str, BeforeValidator(normalize_time_slot)]
