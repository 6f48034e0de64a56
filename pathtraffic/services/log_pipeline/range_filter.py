# range_filter.py - Keeps only records inside an inclusive window of UTC calendar days.

from __future__ import annotations
from datetime import date, datetime, time, timezone
from typing import List, Tuple

from .parser import RawRecord

DAY_START = time(0, 0, 0, 0, tzinfo=timezone.utc)
# Last millisecond of the day; 23:59:59.9995 is already past the window
DAY_END = time(23, 59, 59, 999000, tzinfo=timezone.utc)


def utc_day_bounds(date_from: date, date_to: date) -> Tuple[datetime, datetime]:
    """[from 00:00:00.000Z, to 23:59:59.999Z]"""
    return datetime.combine(date_from, DAY_START), datetime.combine(date_to, DAY_END)


def filter_by_range(records: List[RawRecord], date_from: date, date_to: date) -> List[RawRecord]:
    start, end = utc_day_bounds(date_from, date_to)
    return [r for r in records if start <= r.timestamp <= end]
