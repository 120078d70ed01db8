"""Dashboard assembly: every metric for one refresh, in a single call.

Each refresh takes a fresh snapshot of records and recomputes everything:

    Ledger → Range Filter → Aggregator (+ Clock) → DashboardResult

``build_dashboard`` serves both the network-wide administrator view and the
per-location view (pass ``location_id``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from pos_analytics.aggregate import (
    Totals,
    by_category,
    by_hour_shift,
    by_location,
    by_payment_method,
    by_weekday,
    daily_series,
    low_rotation,
    top_products,
)
from pos_analytics.config import AnalyticsConfig
from pos_analytics.ranges import PeriodComparison, RangeSelector, compare_periods
from pos_analytics.records import SaleRecord

logger = logging.getLogger(__name__)

# Rows in the product rankings
NETWORK_TOP_LIMIT = 15
LOCATION_TOP_LIMIT = 10

# Trailing business days charted per range
SERIES_WINDOW_DAYS = {
    RangeSelector.TODAY: 1,
    RangeSelector.LAST_7_DAYS: 7,
    RangeSelector.LAST_30_DAYS: 30,
    RangeSelector.CURRENT_MONTH: 31,
    RangeSelector.ALL_TIME: 365,
}


@dataclass
class DashboardResult:
    """All metrics of a dashboard refresh for the current window.

    Attributes:
        location_id: Location the dashboard is scoped to (None for network).
        location_name: Display name of that location ("Red" for network).
        comparison: Current/previous period totals and deltas.
        net_revenue: Current-period revenue net of commissions.
        top_products: Best sellers by quantity.
        low_rotation: Slowest movers by quantity.
        payment_methods: Revenue per payment method.
        commissions: Gross, commission and net per payment method.
        shifts: Revenue per shift.
        weekdays: Revenue per weekday.
        daily: Revenue per business day (network total and per location).
        locations: Network overview per location.
        categories: Revenue per product category.
        last_sales: Most recent sales in the current window.
    """

    location_id: int | None
    location_name: str
    comparison: PeriodComparison
    net_revenue: float
    top_products: pd.DataFrame
    low_rotation: pd.DataFrame
    payment_methods: pd.DataFrame
    commissions: pd.DataFrame
    shifts: pd.DataFrame
    weekdays: pd.DataFrame
    daily: pd.DataFrame
    locations: pd.DataFrame
    categories: pd.DataFrame
    last_sales: list[SaleRecord] = field(default_factory=list)

    @property
    def totals(self) -> Totals:
        return self.comparison.current


def build_dashboard(
    records: Iterable[SaleRecord],
    selector: str | RangeSelector,
    now: Any,
    config: AnalyticsConfig | None = None,
    location_id: int | None = None,
    top_limit: int | None = None,
    last_sales_limit: int = 10,
) -> DashboardResult:
    """Compute every dashboard metric for a range.

    Args:
        records: Snapshot of sale records (any order).
        selector: Range selector or its symbolic name.
        now: Reference instant.
        config: Engine configuration (defaults when omitted).
        location_id: Scope to one location (None for the whole network).
        top_limit: Rows in the best-seller and low-rotation rankings. Defaults
            to 15 for the network view and 10 for a single location.
        last_sales_limit: Number of recent sales to include.

    Returns:
        DashboardResult.

    """
    config = config or AnalyticsConfig()
    clock = config.clock()
    commission = config.commission_model()
    registry = config.location_registry()

    if top_limit is None:
        top_limit = NETWORK_TOP_LIMIT if location_id is None else LOCATION_TOP_LIMIT

    records = list(records)
    if location_id is not None:
        records = [r for r in records if r.location_id == location_id]

    comparison = compare_periods(records, selector, now, clock)
    current = comparison.current_records
    selector = comparison.windows.selector

    locations = [location_id] if location_id is not None else registry.list_ids()
    newest_first = sorted(current, key=lambda r: r.created_at, reverse=True)

    result = DashboardResult(
        location_id=location_id,
        location_name=registry.name_for(location_id) if location_id is not None else "Red",
        comparison=comparison,
        net_revenue=commission.net_revenue(current),
        top_products=top_products(current, limit=top_limit),
        low_rotation=low_rotation(current, limit=top_limit),
        payment_methods=by_payment_method(current),
        commissions=commission.commission_by_method(current),
        shifts=by_hour_shift(current, clock),
        weekdays=by_weekday(current, clock),
        daily=daily_series(current, SERIES_WINDOW_DAYS[selector], clock, now=now, locations=locations),
        locations=by_location(current, registry),
        categories=by_category(current),
        last_sales=newest_first[:last_sales_limit],
    )
    logger.info(
        "Dashboard %s for %s: %d sales, revenue %.2f",
        selector.value, result.location_name, result.totals.count, result.totals.revenue,
    )
    return result
