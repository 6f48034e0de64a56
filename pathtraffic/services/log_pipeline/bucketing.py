# bucketing.py - Maps a UTC instant to the local calendar date of a fixed-offset zone.

from __future__ import annotations
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Union


class Zone(str, Enum):
    """Supported report zones. Fixed offsets, no daylight saving."""
    JST = "jst"
    ICT = "ict"


ZONE_OFFSETS: Dict[Zone, timedelta] = {
    Zone.JST: timedelta(hours=9),
    Zone.ICT: timedelta(hours=7),
}

# Date string for an instant shifted past datetime.max
PAST_MAX_DATE = "10000-01-01"


def bucket_date(instant: datetime, zone: Union[Zone, str]) -> str:
    """
    instant + fixed offset, truncated to YYYY-MM-DD.
    e.g. 2025-01-01T17:00:00Z -> '2025-01-02' in ict (+7h) and in jst (+9h).
    Raises ValueError for an unknown zone tag.
    """
    offset = ZONE_OFFSETS[Zone(zone)]
    try:
        shifted = instant + offset
    except OverflowError:
        return PAST_MAX_DATE
    return shifted.date().isoformat()
