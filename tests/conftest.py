from __future__ import annotations

from typing import Callable

import pytest

from pathtraffic.models.schemas import AggregateOptions


@pytest.fixture()
def make_options() -> Callable[..., AggregateOptions]:
    """Build validated options; defaults cover all of January 2025 in JST."""

    def _make(
        date_from: str = "2025-01-01",
        date_to: str = "2025-01-31",
        tz: str = "jst",
        top: int = 10,
    ) -> AggregateOptions:
        return AggregateOptions(date_from=date_from, date_to=date_to, tz=tz, top=top)

    return _make
