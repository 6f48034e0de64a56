#grouping.py - Puts records with the same local date and path into the same pile and keeps running sums.

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Union

from .bucketing import Zone, bucket_date
from .parser import RawRecord


class GroupKey(NamedTuple):
    date: str
    path: str


# Running state for one (date, path). sum is None once any contributing latency was not a number.
@dataclass
class GroupAccumulator:
    sum: Optional[int] = 0
    count: int = 0

    def add(self, latency_ms: Optional[int]) -> None:
        self.count += 1
        if self.sum is None or latency_ms is None:
            self.sum = None
        else:
            self.sum += latency_ms


# One line of the report.
@dataclass(frozen=True)
class SummaryRecord:
    date: str
    path: str
    count: int
    avg_latency: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "path": self.path,
            "count": self.count,
            "avgLatency": self.avg_latency,
        }


def round_half_up(total: int, count: int) -> int:
    """
    floor(total / count + 0.5) in integer arithmetic, so x.5 always goes up
    (1.5 -> 2, 2.5 -> 3, -1.5 -> -1), never banker's rounding.
    """
    return (2 * total + count) // (2 * count)


def group_records(records: List[RawRecord], zone: Union[Zone, str]) -> List[SummaryRecord]:
    """
    Grouping:
    key = (bucket date in zone, path)
    Output order between groups is not meaningful; ranking fixes it.
    """
    buckets: Dict[GroupKey, GroupAccumulator] = {}
    for r in records:
        key = GroupKey(bucket_date(r.timestamp, zone), r.path)
        buckets.setdefault(key, GroupAccumulator()).add(r.latency_ms)

    return [
        SummaryRecord(
            date=key.date,
            path=key.path,
            count=acc.count,
            avg_latency=None if acc.sum is None else round_half_up(acc.sum, acc.count),
        )
        for key, acc in buckets.items()
    ]
