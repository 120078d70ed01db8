"""Historical baselines for the growth estimate.

This module groups sale history into per-business-day revenue and finds the
"similar days" for a reference business day: past days that share both its
ISO weekday and its calendar month. It is the same look-back idea as a
naive last-week model, widened from "the same weekday last week" to "the
same weekday in the same month, any year".
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from pos_analytics.records import SaleRecord, sales_frame

if TYPE_CHECKING:
    from pos_analytics.clock import BusinessDayClock


def daily_revenue(
    records: Iterable[SaleRecord],
    clock: BusinessDayClock,
    before: date | None = None,
) -> pd.Series:
    """Total revenue per business day.

    Args:
        records: Sale records.
        clock: Business-day clock.
        before: If given, only business days strictly before this day are kept.

    Returns:
        Series indexed by business day (``datetime.date``), oldest first.
        Days without sales are absent.

    """
    sales = sales_frame(records, clock)
    if before is not None and not sales.empty:
        sales = sales[sales["business_day"] < before]
    if sales.empty:
        return pd.Series(dtype=float, name="revenue")
    series = sales.groupby("business_day")["total"].sum().sort_index()
    series.name = "revenue"
    return series.astype(float)


def find_similar_days(daily: pd.Series, reference_day: date) -> list[date]:
    """Historical days sharing the reference day's ISO weekday and month.

    Example:
        If the reference is Friday 2025-01-17, every Friday in any January
        present in ``daily`` is returned.

    """
    return [
        day
        for day in daily.index
        if day.weekday() == reference_day.weekday() and day.month == reference_day.month
    ]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up (2.5 -> 3, -2.5 -> -2)."""
    return int(np.floor(value + 0.5))


def growth_percent(context_average: float, global_average: float) -> int:
    """Expected growth of the context against the global baseline, in percent.

    Returns 0 when there is no positive baseline, so an empty or near-empty
    history never produces an inflated ratio.

    Examples:
        >>> growth_percent(120.0, 100.0)
        20
        >>> growth_percent(50.0, 0.0)
        0

    """
    if not global_average > 0:
        return 0
    return round_half_up((context_average / global_average - 1.0) * 100.0)
