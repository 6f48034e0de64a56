#pipeline.py - Orchestrates the full aggregation flow.

from __future__ import annotations
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, TypeVar

from .parser import RawRecord, parse_lines
from .range_filter import filter_by_range
from .grouping import SummaryRecord, group_records
from .ranking import rank_top_n

if TYPE_CHECKING:
    from pathtraffic.models.schemas import AggregateOptions

HEADER_PREFIX = "timestamp"

# Called once per stage with (stage name, elapsed milliseconds)
StageHook = Callable[[str, float], None]

T = TypeVar("T")


# Every intermediate result of one run, for callers that report counts.
@dataclass(frozen=True)
class PipelineRun:
    records: List[RawRecord]
    in_range: List[RawRecord]
    groups: List[SummaryRecord]
    ranked: List[SummaryRecord]


def strip_header(lines: Sequence[str]) -> Sequence[str]:
    """Drop a leading `timestamp,...` header. Only the first line is looked at."""
    if lines and lines[0].lstrip().startswith(HEADER_PREFIX):
        return lines[1:]
    return lines


def _timed(stage: str, on_stage: Optional[StageHook], fn: Callable[..., T], *args: Any) -> T:
    t0 = time.perf_counter()
    out = fn(*args)
    if on_stage is not None:
        on_stage(stage, (time.perf_counter() - t0) * 1000)
    return out


# The order is fixed: raw lines -> parser.py -> range_filter.py -> grouping.py (bucketing.py) -> ranking.py.
def run_pipeline(
    lines: Sequence[str],
    options: AggregateOptions,
    on_stage: Optional[StageHook] = None,
) -> PipelineRun:
    records = _timed("parse", on_stage, parse_lines, strip_header(lines))
    in_range = _timed("filter", on_stage, filter_by_range, records, options.date_from, options.date_to)
    groups = _timed("group", on_stage, group_records, in_range, options.tz)
    ranked = _timed("rank", on_stage, rank_top_n, groups, options.top)
    return PipelineRun(records=records, in_range=in_range, groups=groups, ranked=ranked)


def aggregate(lines: Sequence[str], options: AggregateOptions) -> List[SummaryRecord]:
    """
    Main entrypoint:
    raw lines + validated options -> report rows ordered by date asc, count desc, path asc
    """
    return run_pipeline(lines, options).ranked


def aggregate_to_dicts(lines: Sequence[str], options: AggregateOptions) -> List[Dict[str, Any]]:
    return [s.to_dict() for s in aggregate(lines, options)]
