"""Range filter: relative date windows and period-over-period comparison.

A range selector plus a reference instant ``now`` resolve into two windows:

- the **current window** ``[start, now]`` (both ends inclusive), and
- the **comparison window** ``[start', start)`` immediately before it.

Selectors:
    today          current business day (03:00 cutoff) vs the previous one
    last_7_days    the last 7 × 24 h vs the 7 × 24 h before that
    last_30_days   the last 30 × 24 h vs the 30 × 24 h before that
    current_month  first calendar day of the month vs the whole previous
                   calendar month (month-to-month, not day-count-to-day-count)
    all_time       unbounded, no comparison window

Because the comparison window is half-open and ends where the current one
starts, a sale at the boundary instant belongs to exactly one window.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

import pandas as pd

from pos_analytics.aggregate import Totals, totals
from pos_analytics.clock import parse_instant
from pos_analytics.exceptions import ConfigError
from pos_analytics.records import SaleRecord

if TYPE_CHECKING:
    from pos_analytics.clock import BusinessDayClock

logger = logging.getLogger(__name__)


class RangeSelector(str, Enum):
    TODAY = "today"
    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    CURRENT_MONTH = "current_month"
    ALL_TIME = "all_time"


_TRAILING_DAYS = {
    RangeSelector.LAST_7_DAYS: 7,
    RangeSelector.LAST_30_DAYS: 30,
}


def parse_selector(value: str | RangeSelector) -> RangeSelector:
    """Resolve a symbolic range name.

    Raises:
        ConfigError: If the name is not a known selector.

    """
    if isinstance(value, RangeSelector):
        return value
    try:
        return RangeSelector(str(value).strip().lower())
    except ValueError as e:
        valid = ", ".join(s.value for s in RangeSelector)
        raise ConfigError(f"Unknown range {value!r}. Valid ranges: {valid}") from e


@dataclass(frozen=True)
class TimeWindow:
    """A window of UTC instants. ``None`` bounds are unbounded."""

    start: pd.Timestamp | None
    end: pd.Timestamp | None
    include_end: bool = True

    def contains(self, t: Any) -> bool:
        ts = parse_instant(t)
        if self.start is not None and ts < self.start:
            return False
        if self.end is not None:
            return ts <= self.end if self.include_end else ts < self.end
        return True

    def filter(self, records: Iterable[SaleRecord]) -> list[SaleRecord]:
        """Records whose ``created_at`` falls in the window, order kept."""
        return [r for r in records if self.contains(r.created_at)]


@dataclass(frozen=True)
class RangeWindows:
    selector: RangeSelector
    current: TimeWindow
    comparison: TimeWindow | None


def resolve_windows(
    selector: str | RangeSelector,
    now: Any,
    clock: BusinessDayClock,
) -> RangeWindows:
    """Compute the current and comparison windows for a selector.

    Args:
        selector: Range selector (or its symbolic name).
        now: Reference instant.
        clock: Business-day clock (used by ``today`` and ``current_month``).

    Returns:
        RangeWindows with the current window and, except for ``all_time``,
        the comparison window.

    Example:
        >>> clock = BusinessDayClock()
        >>> w = resolve_windows("last_7_days", "2024-03-15T00:00:00Z", clock)
        >>> str(w.current.start), str(w.comparison.start)
        ('2024-03-08 00:00:00+00:00', '2024-03-01 00:00:00+00:00')

    """
    selector = parse_selector(selector)
    now_ts = parse_instant(now, "now")

    if selector is RangeSelector.ALL_TIME:
        return RangeWindows(selector, TimeWindow(None, None), None)

    if selector is RangeSelector.TODAY:
        day = clock.business_day_key(now_ts)
        start = clock.business_day_start(day)
        previous_start = clock.business_day_start(day - timedelta(days=1))
    elif selector is RangeSelector.CURRENT_MONTH:
        first = clock.to_local(now_ts).date().replace(day=1)
        previous_first = (first - timedelta(days=1)).replace(day=1)
        start = clock.local_midnight(first)
        previous_start = clock.local_midnight(previous_first)
    else:
        span = pd.Timedelta(days=_TRAILING_DAYS[selector])
        start = now_ts - span
        previous_start = start - span

    windows = RangeWindows(
        selector=selector,
        current=TimeWindow(start, now_ts, include_end=True),
        comparison=TimeWindow(previous_start, start, include_end=False),
    )
    logger.debug(
        "Resolved %s: current [%s, %s], comparison [%s, %s)",
        selector.value, start, now_ts, previous_start, start,
    )
    return windows


def percent_delta(current: float, previous: float) -> float | None:
    """Period-over-period change in percent.

    Returns None ("no comparison available") when the previous value is 0.

    Examples:
        >>> percent_delta(150.0, 100.0)
        50.0
        >>> percent_delta(10.0, 0.0) is None
        True

    """
    if previous == 0:
        return None
    return (current - previous) / previous * 100.0


@dataclass(frozen=True)
class PeriodComparison:
    """Current-period figures and their change against the comparison period."""

    windows: RangeWindows
    current_records: list[SaleRecord]
    previous_records: list[SaleRecord]
    current: Totals
    previous: Totals | None

    @property
    def revenue_delta(self) -> float | None:
        if self.previous is None:
            return None
        return percent_delta(self.current.revenue, self.previous.revenue)

    @property
    def count_delta(self) -> float | None:
        if self.previous is None:
            return None
        return percent_delta(self.current.count, self.previous.count)

    @property
    def item_delta(self) -> float | None:
        if self.previous is None:
            return None
        return percent_delta(self.current.item_count, self.previous.item_count)


def compare_periods(
    records: Iterable[SaleRecord],
    selector: str | RangeSelector,
    now: Any,
    clock: BusinessDayClock,
) -> PeriodComparison:
    """Split a record set into current and comparison periods and total them."""
    records = list(records)
    windows = resolve_windows(selector, now, clock)

    current_records = windows.current.filter(records)
    if windows.comparison is not None:
        previous_records = windows.comparison.filter(records)
        previous: Totals | None = totals(previous_records)
    else:
        previous_records = []
        previous = None

    return PeriodComparison(
        windows=windows,
        current_records=current_records,
        previous_records=previous_records,
        current=totals(current_records),
        previous=previous,
    )
