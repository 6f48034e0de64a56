import re
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from pathtraffic.services.log_pipeline.bucketing import Zone

DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


# ============================================================================
# Report Options
# ============================================================================

class AggregateOptions(BaseModel):
    """
    Resolved report options. Validated here so the pipeline can trust them.
    from/to are UTC calendar days; from <= to is not enforced.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date_from: date = Field(alias="from")
    date_to: date = Field(alias="to")
    tz: Zone
    top: PositiveInt

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _require_iso_day(cls, v: Any) -> Any:
        # pydantic would also take unix timestamps and datetimes; only YYYY-MM-DD is a day
        if isinstance(v, datetime):
            raise ValueError("expected a calendar date, not a datetime")
        if isinstance(v, date):
            return v
        if not isinstance(v, str) or not DATE_RE.fullmatch(v.strip()):
            raise ValueError("date must be formatted as YYYY-MM-DD")
        return v.strip()

    @field_validator("tz", mode="before")
    @classmethod
    def _lower_zone(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


# ============================================================================
# API Response Models
# ============================================================================

class PathDaySummary(BaseModel):
    """Request count and mean latency of one path on one local day."""
    model_config = ConfigDict(populate_by_name=True)

    date: str
    path: str
    count: int
    avg_latency: Optional[int] = Field(default=None, alias="avgLatency")


class AggregateResponse(BaseModel):
    """Response from POST /api/aggregate."""
    request_id: str
    filename: str
    num_lines: int
    num_records: int
    num_groups: int
    items: List[PathDaySummary]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    request_id: Optional[str] = None
