# ranking.py - Picks the busiest paths per day and fixes the final report order.

from __future__ import annotations
from typing import Dict, List, Tuple

from .grouping import SummaryRecord


def _per_date_key(s: SummaryRecord) -> Tuple[int, str]:
    # count DESC, path ASC
    return (-s.count, s.path)


def _global_key(s: SummaryRecord) -> Tuple[str, int, str]:
    # date ASC, count DESC, path ASC
    return (s.date, -s.count, s.path)


def rank_top_n(summaries: List[SummaryRecord], top: int) -> List[SummaryRecord]:
    """
    1. partition by date
    2. sort each partition by count desc, path asc
    3. keep the first `top` of each partition (never padded)
    4. concatenate and sort by date asc, count desc, path asc

    `top` must already be a positive integer.
    """
    by_date: Dict[str, List[SummaryRecord]] = {}
    for s in summaries:
        by_date.setdefault(s.date, []).append(s)

    final: List[SummaryRecord] = []
    for items in by_date.values():
        items.sort(key=_per_date_key)
        final.extend(items[:top])

    final.sort(key=_global_key)
    return final
