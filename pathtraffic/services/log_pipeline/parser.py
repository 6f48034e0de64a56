# parser.py - Turns raw access-log lines into clean request records, dropping anything structurally broken.

from __future__ import annotations
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from pathtraffic.core.logging import get_logger

logger = get_logger(__name__)

FIELD_DELIMITER = ","
FIELD_COUNT = 5

# Plain base-10 integer: optional sign, ASCII digits only (int() alone would accept "1_000" or " 7 ").
# At most 18 digits, so every value fits a signed 64-bit integer and int() never hits its digit limit.
INT_RE = re.compile(r"[+-]?[0-9]{1,18}")


# One accepted request line. status / latency_ms are None when the field was present but not a number.
@dataclass(frozen=True)
class RawRecord:
    timestamp: datetime
    user_id: str
    path: str
    status: Optional[int]
    latency_ms: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["timestamp"] = self.timestamp.isoformat()
        return d


# ISO-8601 extended form: date, optional [T ]HH:MM[:SS[.ffffff]], optional Z or ±HH:MM.
# Example: 2025-01-03T10:12:00Z, 2025-01-03T19:12:00.5+09:00, 2025-01-03 10:12, 2025-01-03
ISO_TS_RE = re.compile(
    r"""
    ^
    (?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})
    (?:
        [T ]
        (?P<hour>\d{2}):(?P<minute>\d{2})
        (?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,6}))?)?
        (?P<offset>[Zz]|(?P<sign>[+-])(?P<off_hour>\d{2}):(?P<off_minute>\d{2}))?
    )?
    $
    """,
    re.VERBOSE | re.ASCII,
)


def _offset(m: "re.Match[str]") -> timezone:
    if not m.group("sign"):
        # 'Z' or no offset at all
        return timezone.utc
    off_minute = int(m.group("off_minute"))
    if off_minute > 59:
        raise ValueError(f"offset minutes out of range: {off_minute}")
    delta = timedelta(hours=int(m.group("off_hour")), minutes=off_minute)
    return timezone(-delta if m.group("sign") == "-" else delta)


def parse_timestamp(ts: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 instant and return it as an aware UTC datetime.
    - 2025-01-03T10:12:00Z            -> UTC
    - 2025-01-03T19:12:00+09:00       -> converted to UTC
    - 2025-01-03T10:12:00 (no offset) -> taken as UTC
    - 2025-01-03                      -> midnight UTC
    Returns None when the text is not a timestamp.
    """
    m = ISO_TS_RE.match(ts.strip())
    if not m:
        return None

    try:
        dt = datetime(
            int(m.group("year")),
            int(m.group("month")),
            int(m.group("day")),
            int(m.group("hour") or 0),
            int(m.group("minute") or 0),
            int(m.group("second") or 0),
            int((m.group("fraction") or "0").ljust(6, "0")),
            tzinfo=_offset(m),
        )
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # ValueError: 2017-02-29, 24:12, offset of 24h or more
        # OverflowError: an offset pushing year 1 / 9999 out of range
        return None


def parse_int(value: str) -> Optional[int]:
    if not INT_RE.fullmatch(value):
        return None
    return int(value)


def parse_line(line: str) -> Optional[RawRecord]:
    """
    Parse one `timestamp,userId,path,status,latencyMs` line.

    Wrong field count, an empty field or an unreadable timestamp drops the line (None).
    An unreadable status/latency keeps the line with None in that field.
    """
    trimmed = line.strip()
    if not trimmed:
        return None

    cols = [c.strip() for c in trimmed.split(FIELD_DELIMITER)]
    if len(cols) != FIELD_COUNT or not all(cols):
        return None

    ts_raw, user_id, path, status_raw, latency_raw = cols

    dt = parse_timestamp(ts_raw)
    if dt is None:
        return None

    return RawRecord(
        timestamp=dt,
        user_id=user_id,
        path=path,
        status=parse_int(status_raw),
        latency_ms=parse_int(latency_raw),
    )


def parse_lines(lines: Iterable[str]) -> List[RawRecord]:
    records: List[RawRecord] = []
    dropped = 0
    for line in lines:
        rec = parse_line(line)
        if rec is None:
            if line.strip():
                dropped += 1
            continue
        records.append(rec)

    if dropped:
        logger.debug(f"Dropped {dropped} malformed lines, kept {len(records)}")
    return records
