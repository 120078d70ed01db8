"""Aggregator: pure folds over a set of sale records.

Every function here takes a record set (any iterable of ``SaleRecord``) and
returns a result without touching external state. All of them are total:
an empty record set yields zero-valued totals or empty/zero-filled frames,
never an error.

Tabular results are returned as DataFrames, one row per bucket, with the
common columns ``revenue``, ``sale_count`` and ``item_count``.

Input order only matters for ``top_products``: products are ranked with a
stable sort over the order in which they are first seen, so ties keep
first-seen order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

import pandas as pd

from pos_analytics.clock import SHIFT_ORDER
from pos_analytics.date_formatters import weekday_name
from pos_analytics.locations import LocationRegistry
from pos_analytics.records import (
    PaymentMethod,
    SaleRecord,
    item_lines_frame,
    payment_label,
    sales_frame,
)

if TYPE_CHECKING:
    from pos_analytics.clock import BusinessDayClock

logger = logging.getLogger(__name__)

UNCATEGORIZED_LABEL = "Sin categoría"

PRODUCT_RANK_COLUMNS = ["product_key", "product_id", "product_name", "quantity", "revenue"]
SORT_KEYS = {"quantity", "revenue"}
SORT_ORDERS = {"desc", "asc"}


@dataclass(frozen=True)
class Totals:
    """Headline figures for a record set."""

    count: int
    revenue: float
    item_count: int

    @property
    def average_ticket(self) -> float:
        return self.revenue / self.count if self.count else 0.0


def totals(records: Iterable[SaleRecord]) -> Totals:
    """Count, revenue (Σ total) and items sold (Σ line quantity).

    Example:
        >>> totals([])
        Totals(count=0, revenue=0.0, item_count=0)

    """
    count = 0
    revenue = 0.0
    item_count = 0
    for r in records:
        count += 1
        revenue += r.total
        item_count += r.item_count
    return Totals(count=count, revenue=float(revenue), item_count=item_count)


def per_location_totals(records: Iterable[SaleRecord], location_id: int) -> Totals:
    """Totals restricted to a single location."""
    return totals(r for r in records if r.location_id == location_id)


def top_products(
    records: Iterable[SaleRecord],
    limit: int | None = 10,
    sort_key: str = "quantity",
    order: str = "desc",
) -> pd.DataFrame:
    """Rank products by units sold or revenue.

    Line items are grouped by their canonical product key (``product_id``,
    falling back to ``product_name``), summing quantity and subtotal. The
    display name is the first name seen for the key.

    Args:
        records: Sale records.
        limit: Maximum number of rows to return (None for all).
        sort_key: "quantity" or "revenue".
        order: "desc" for best sellers, "asc" for low rotation.

    Returns:
        DataFrame with columns: product_key, product_id, product_name,
        quantity, revenue.

    Raises:
        ValueError: If sort_key or order is not recognized.

    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"sort_key must be one of {sorted(SORT_KEYS)}, got {sort_key!r}")
    if order not in SORT_ORDERS:
        raise ValueError(f"order must be one of {sorted(SORT_ORDERS)}, got {order!r}")

    lines = item_lines_frame(records)
    if lines.empty:
        return pd.DataFrame(columns=PRODUCT_RANK_COLUMNS)

    # sort=False keeps groups in first-seen order; the stable sort below
    # then resolves ties in favour of the product seen first.
    ranked = lines.groupby("product_key", sort=False).agg(
        product_id=("product_id", "first"),
        product_name=("product_name", "first"),
        quantity=("quantity", "sum"),
        revenue=("subtotal", "sum"),
    )
    ranked = ranked.reset_index()
    ranked = ranked.sort_values(sort_key, ascending=(order == "asc"), kind="stable")
    if limit is not None:
        ranked = ranked.head(limit)
    return ranked[PRODUCT_RANK_COLUMNS].reset_index(drop=True)


def low_rotation(
    records: Iterable[SaleRecord],
    limit: int | None = 10,
    sort_key: str = "quantity",
) -> pd.DataFrame:
    """Slowest-moving products: the ascending view of :func:`top_products`."""
    return top_products(records, limit=limit, sort_key=sort_key, order="asc")


def by_payment_method(records: Iterable[SaleRecord], split_mixed: bool = False) -> pd.DataFrame:
    """Revenue per payment method, sorted descending by revenue.

    Sales without a method are reported under ``"Unknown"``. The buckets
    partition the record set, so their revenues add up to the total revenue.

    Args:
        records: Sale records.
        split_mixed: If True, a Mixed sale's breakdown amounts are credited to
            their component methods instead of a single "Mixed" bucket.

    Returns:
        DataFrame with columns: payment_method, revenue, sale_count, share
        (percent of revenue, 0 when there is no revenue). With split_mixed
        the count column is ``payment_count``: it counts payment parts, so a
        Mixed sale contributes one to each of its methods.

    """
    rows: list[tuple[str, float]] = []
    for r in records:
        if split_mixed and r.payment_method is PaymentMethod.MIXED and r.payment_breakdown:
            rows.extend((payment_label(part.method), part.amount) for part in r.payment_breakdown)
        else:
            rows.append((r.payment_label, r.total))

    count_column = "payment_count" if split_mixed else "sale_count"
    if not rows:
        return pd.DataFrame(columns=["payment_method", "revenue", count_column, "share"])

    df = pd.DataFrame(rows, columns=["payment_method", "revenue"])
    grouped = df.groupby("payment_method", sort=False).agg(
        revenue=("revenue", "sum"),
        **{count_column: ("revenue", "size")},
    )
    grouped = grouped.reset_index().sort_values("revenue", ascending=False, kind="stable")
    total = grouped["revenue"].sum()
    grouped["share"] = grouped["revenue"] / total * 100.0 if total > 0 else 0.0
    return grouped.reset_index(drop=True)


def _bucket_stats(sales: pd.DataFrame, key: str, keys: list[Any]) -> pd.DataFrame:
    """Revenue, sale count and item count per key, zero-filled for ``keys``."""
    grouped = sales.groupby(key).agg(
        revenue=("total", "sum"),
        sale_count=("total", "size"),
        item_count=("item_count", "sum"),
    )
    grouped = grouped.reindex(keys, fill_value=0)
    grouped["revenue"] = grouped["revenue"].astype(float)
    grouped["sale_count"] = grouped["sale_count"].astype(int)
    grouped["item_count"] = grouped["item_count"].astype(int)
    grouped.index.name = key
    return grouped.reset_index()


def by_hour_shift(records: Iterable[SaleRecord], clock: BusinessDayClock) -> pd.DataFrame:
    """Revenue per shift (morning, midday, afternoon, night).

    Sales in the closed window (02:00-09:00 local) belong to no shift and are
    left out of both the buckets and the percentage denominator.

    Returns:
        Four rows in shift order with columns: shift, revenue, sale_count,
        item_count, percent (share of the shift total; 0 when the shift
        total is 0).

    """
    sales = sales_frame(records, clock)
    sales = sales[sales["shift"].notna()]
    result = _bucket_stats(sales, "shift", [s.value for s in SHIFT_ORDER])

    shift_total = result["revenue"].sum()
    if shift_total > 0:
        result["percent"] = result["revenue"] / shift_total * 100.0
    else:
        result["percent"] = 0.0
    return result


def by_weekday(records: Iterable[SaleRecord], clock: BusinessDayClock) -> pd.DataFrame:
    """Revenue per local weekday, always seven rows Monday to Sunday.

    Returns:
        DataFrame with columns: iso_weekday, weekday, revenue, sale_count,
        item_count.

    """
    sales = sales_frame(records, clock)
    result = _bucket_stats(sales, "iso_weekday", list(range(1, 8)))
    result.insert(1, "weekday", [weekday_name(i) for i in result["iso_weekday"]])
    return result


def daily_series(
    records: Iterable[SaleRecord],
    window_days: int,
    clock: BusinessDayClock,
    now: Any = None,
    locations: Iterable[int] | None = None,
) -> pd.DataFrame:
    """Revenue per business day over a trailing window, network-wide and per location.

    The window covers ``window_days`` business days ending with the business
    day of ``now`` (or, when ``now`` is omitted, the newest business day in
    the data). Only business days with at least one sale produce a row; gaps
    are not zero-filled.

    Args:
        records: Sale records.
        window_days: Number of trailing business days (>= 1).
        clock: Business-day clock.
        now: Reference instant. Defaults to the newest sale.
        locations: Location ids that always get a column, even without sales.

    Returns:
        DataFrame ordered oldest to newest with columns: business_day, total,
        and one ``location_<id>`` column per location.

    Raises:
        ValueError: If window_days is not positive.

    """
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")

    sales = sales_frame(records, clock)
    location_ids = sorted(set(locations or []) | set(sales["location_id"].tolist()))
    columns = ["business_day", "total"] + [f"location_{i}" for i in location_ids]

    if sales.empty:
        return pd.DataFrame(columns=columns)

    anchor: date = clock.business_day_key(now) if now is not None else max(sales["business_day"])
    first = anchor - timedelta(days=window_days - 1)
    in_window = sales[(sales["business_day"] >= first) & (sales["business_day"] <= anchor)]
    if in_window.empty:
        return pd.DataFrame(columns=columns)

    per_location = (
        in_window.groupby(["business_day", "location_id"])["total"]
        .sum()
        .unstack(fill_value=0.0)
        .reindex(columns=location_ids, fill_value=0.0)
    )
    per_location.columns = [f"location_{i}" for i in location_ids]
    per_location.insert(0, "total", per_location.sum(axis=1))
    per_location.index.name = "business_day"

    logger.debug(
        "daily_series: %d business days between %s and %s", len(per_location), first, anchor
    )
    return per_location.sort_index().reset_index()[columns]


def by_location(
    records: Iterable[SaleRecord],
    registry: LocationRegistry | None = None,
) -> pd.DataFrame:
    """Network overview: one row per location.

    Every registered location is listed (zero-filled when it has no sales),
    plus any unregistered location that appears in the data.

    Returns:
        DataFrame with columns: location_id, name, revenue, sale_count,
        item_count, share (percent of network revenue).

    """
    registry = registry or LocationRegistry()
    records = list(records)
    location_ids = sorted(set(registry.list_ids()) | {r.location_id for r in records})

    rows = []
    for location_id in location_ids:
        t = per_location_totals(records, location_id)
        rows.append(
            {
                "location_id": location_id,
                "name": registry.name_for(location_id),
                "revenue": t.revenue,
                "sale_count": t.count,
                "item_count": t.item_count,
            }
        )

    df = pd.DataFrame(rows, columns=["location_id", "name", "revenue", "sale_count", "item_count"])
    network = df["revenue"].sum()
    df["share"] = df["revenue"] / network * 100.0 if network > 0 else 0.0
    return df


def by_category(records: Iterable[SaleRecord]) -> pd.DataFrame:
    """Units and revenue per product category, sorted by revenue descending.

    Lines without a category are grouped under ``"Sin categoría"``.

    Returns:
        DataFrame with columns: category, quantity, revenue.

    """
    lines = item_lines_frame(records)
    if lines.empty:
        return pd.DataFrame(columns=["category", "quantity", "revenue"])

    lines["category"] = lines["category"].fillna(UNCATEGORIZED_LABEL)
    grouped = lines.groupby("category", sort=False).agg(
        quantity=("quantity", "sum"),
        revenue=("subtotal", "sum"),
    )
    grouped = grouped.reset_index().sort_values("revenue", ascending=False, kind="stable")
    return grouped.reset_index(drop=True)
