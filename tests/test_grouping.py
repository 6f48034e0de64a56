"""
tests/test_grouping.py

Grouper arithmetic: counts, latency sums, half-up averages and
not-a-number contamination.
"""

from __future__ import annotations

import pytest

from pathtraffic.services.log_pipeline.grouping import (
    GroupAccumulator,
    GroupKey,
    SummaryRecord,
    group_records,
    round_half_up,
)
from pathtraffic.services.log_pipeline.parser import parse_lines


def _by_key(summaries):
    return {GroupKey(s.date, s.path): s for s in summaries}


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "total,count,expected",
        [
            (300, 2, 150),
            (4, 3, 1),  # 1.33
            (5, 3, 2),  # 1.67
            (3, 2, 2),  # 1.5
            (5, 2, 3),  # 2.5, not banker's 2
            (0, 4, 0),
            (-3, 2, -1),  # -1.5 goes toward +inf
            (-5, 3, -2),  # -1.67
        ],
    )
    def test_rounding(self, total: int, count: int, expected: int) -> None:
        assert round_half_up(total, count) == expected


class TestAccumulator:
    def test_sums_and_counts(self) -> None:
        acc = GroupAccumulator()
        acc.add(100)
        acc.add(200)
        assert (acc.sum, acc.count) == (300, 2)

    def test_none_contaminates_for_good(self) -> None:
        acc = GroupAccumulator()
        acc.add(100)
        acc.add(None)
        acc.add(50)
        assert acc.sum is None
        assert acc.count == 3


class TestGroupRecords:
    def test_same_date_and_path_are_merged(self) -> None:
        records = parse_lines([
            "2025-01-01T10:00:00Z,u1,/api/orders,200,100",
            "2025-01-01T11:00:00Z,u2,/api/orders,200,200",
        ])
        assert group_records(records, "jst") == [
            SummaryRecord(date="2025-01-01", path="/api/orders", count=2, avg_latency=150)
        ]

    def test_key_is_bucketed_date_not_utc_date(self) -> None:
        records = parse_lines([
            "2025-01-01T14:00:00Z,u1,/a,200,10",
            "2025-01-01T16:00:00Z,u1,/a,200,20",
        ])
        groups = _by_key(group_records(records, "jst"))
        assert groups[GroupKey("2025-01-01", "/a")].count == 1
        assert groups[GroupKey("2025-01-02", "/a")].count == 1

    def test_paths_containing_separators_do_not_collide(self) -> None:
        records = parse_lines([
            "2025-01-01T10:00:00Z,u1,/a#b,200,10",
            "2025-01-01T10:00:00Z,u1,/a,200,20",
        ])
        assert len(group_records(records, "ict")) == 2

    def test_nan_latency_propagates_to_average(self) -> None:
        records = parse_lines([
            "2025-01-01T10:00:00Z,u1,/a,200,100",
            "2025-01-01T10:00:00Z,u1,/a,200,abc",
            "2025-01-01T10:00:00Z,u1,/b,200,40",
        ])
        groups = _by_key(group_records(records, "jst"))
        assert groups[GroupKey("2025-01-01", "/a")].count == 2
        assert groups[GroupKey("2025-01-01", "/a")].avg_latency is None
        assert groups[GroupKey("2025-01-01", "/b")].avg_latency == 40

    def test_nan_status_does_not_affect_latency(self) -> None:
        records = parse_lines(["2025-01-01T10:00:00Z,u1,/a,oops,100"])
        assert group_records(records, "jst")[0].avg_latency == 100

    def test_empty_input(self) -> None:
        assert group_records([], "jst") == []

    def test_to_dict_uses_wire_names(self) -> None:
        s = SummaryRecord(date="2025-01-01", path="/a", count=1, avg_latency=None)
        assert s.to_dict() == {"date": "2025-01-01", "path": "/a", "count": 1, "avgLatency": None}
