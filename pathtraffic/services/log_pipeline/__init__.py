# Access-log aggregation pipeline
from .parser import RawRecord, parse_line, parse_lines, parse_timestamp
from .range_filter import filter_by_range, utc_day_bounds
from .bucketing import Zone, ZONE_OFFSETS, bucket_date
from .grouping import GroupKey, GroupAccumulator, SummaryRecord, group_records, round_half_up
from .ranking import rank_top_n
from .pipeline import PipelineRun, StageHook, aggregate, aggregate_to_dicts, run_pipeline, strip_header

__all__ = [
    "RawRecord",
    "parse_line",
    "parse_lines",
    "parse_timestamp",
    "filter_by_range",
    "utc_day_bounds",
    "Zone",
    "ZONE_OFFSETS",
    "bucket_date",
    "GroupKey",
    "GroupAccumulator",
    "SummaryRecord",
    "group_records",
    "round_half_up",
    "rank_top_n",
    "PipelineRun",
    "StageHook",
    "run_pipeline",
    "aggregate",
    "aggregate_to_dicts",
    "strip_header",
]
