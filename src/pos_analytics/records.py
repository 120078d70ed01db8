"""Sale records: the atomic unit every aggregation consumes.

This module defines the immutable data model (SaleRecord, LineItem, payment
enums), the parser that turns ledger rows into records, and the two tabular
views the aggregator folds over:

- **sale grain** (``sales_frame``): one row per sale, with business-day,
  local hour, weekday and shift columns computed by the clock.
- **item-line grain** (``item_lines_frame``): one row per line item, carrying
  the canonical product key.

Product key:
    Line items are grouped by ``product_id``; when the id is absent or blank
    the denormalized ``product_name`` is used instead. The two namespaces
    are kept apart with an ``id:`` / ``name:`` prefix.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np
import pandas as pd

from pos_analytics.clock import parse_instant, shift_for_hour
from pos_analytics.exceptions import RecordContractError

if TYPE_CHECKING:
    from pos_analytics.clock import BusinessDayClock

logger = logging.getLogger(__name__)

UNKNOWN_PAYMENT_LABEL = "Unknown"


class PaymentMethod(str, Enum):
    """Payment methods accepted at checkout."""

    CASH = "Cash"
    TRANSFER = "Transfer"
    QR = "QR"
    DEBIT = "Debit"
    CREDIT = "Credit"
    MIXED = "Mixed"

    @classmethod
    def parse(cls, value: Any) -> PaymentMethod | None:
        """Resolve a payment method from its label (case-insensitive).

        Returns None for missing or unrecognized labels, which the engine
        reports as ``"Unknown"``.
        """
        if value is None:
            return None
        if isinstance(value, PaymentMethod):
            return value
        label = str(value).strip().lower()
        if not label:
            return None
        for method in cls:
            if method.value.lower() == label:
                return method
        logger.debug("Unrecognized payment method %r, treating as unknown", value)
        return None


def payment_label(method: PaymentMethod | None) -> str:
    return method.value if method is not None else UNKNOWN_PAYMENT_LABEL


@dataclass(frozen=True)
class PaymentSplit:
    """One part of a Mixed payment."""

    method: PaymentMethod | None
    amount: float


@dataclass(frozen=True)
class LineItem:
    """A product line on a sale.

    Attributes:
        product_id: Catalog identifier (may be blank on old records).
        product_name: Name snapshot taken at checkout.
        quantity: Units sold (> 0).
        unit_price: Price per unit (>= 0).
        subtotal: Line amount. Defaults to quantity × unit_price; an explicit
            value is kept as-is for historical consistency.
        category: Optional product group label.
    """

    product_id: str | None
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise RecordContractError(
                f"Line item {self.product_name!r} has non-positive quantity {self.quantity}"
            )
        if not np.isfinite(self.unit_price) or self.unit_price < 0:
            raise RecordContractError(
                f"Line item {self.product_name!r} has invalid unit price {self.unit_price}"
            )
        if self.subtotal is None:
            object.__setattr__(self, "subtotal", self.quantity * self.unit_price)

    @property
    def product_key(self) -> str:
        """Canonical grouping key: product_id, falling back to product_name."""
        if self.product_id is not None and str(self.product_id).strip():
            return f"id:{str(self.product_id).strip()}"
        return f"name:{self.product_name.strip()}"


@dataclass(frozen=True)
class SaleRecord:
    """An immutable sale as recorded at checkout.

    ``created_at`` is always a timezone-aware UTC ``pd.Timestamp``.
    ``total`` is expected to equal the sum of line subtotals at creation
    time; it is not re-validated here.
    """

    id: str
    location_id: int
    created_at: pd.Timestamp
    total: float
    items: tuple[LineItem, ...]
    payment_method: PaymentMethod | None = None
    payment_breakdown: tuple[PaymentSplit, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", parse_instant(self.created_at, "created_at"))
        if not self.items:
            raise RecordContractError(f"Sale {self.id} has no line items")
        if not np.isfinite(self.total) or self.total < 0:
            raise RecordContractError(f"Sale {self.id} has invalid total {self.total}")

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def payment_label(self) -> str:
        return payment_label(self.payment_method)


# ----------------------------------------------------------------------------
# Parsing ledger rows
# ----------------------------------------------------------------------------


def _to_amount(value: Any, name: str) -> float:
    if value is None or value == "":
        raise RecordContractError(f"{name} is missing")
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise RecordContractError(f"{name} is not a number: {value!r}") from e
    if not np.isfinite(amount):
        raise RecordContractError(f"{name} is not a finite number: {value!r}")
    return amount


def _to_whole(value: Any, name: str) -> int:
    """Parse an integral count or id; 2.0 and "2" are accepted, 2.5 is not."""
    number = _to_amount(value, name)
    if not number.is_integer():
        raise RecordContractError(f"{name} must be a whole number: {value!r}")
    return int(number)


def _parse_item(row: Mapping[str, Any]) -> LineItem:
    product_id = row.get("product_id")
    subtotal = row.get("subtotal")
    return LineItem(
        product_id=str(product_id) if product_id is not None else None,
        product_name=str(row.get("product_name") or ""),
        quantity=_to_whole(row.get("quantity"), "quantity"),
        unit_price=_to_amount(row.get("unit_price", row.get("price")), "unit_price"),
        subtotal=_to_amount(subtotal, "subtotal") if subtotal is not None else None,
        category=row.get("category") or None,
    )


def _parse_breakdown(raw: Any) -> tuple[PaymentSplit, ...]:
    if not raw:
        return ()
    return tuple(
        PaymentSplit(
            method=PaymentMethod.parse(part.get("method")),
            amount=_to_amount(part.get("amount"), "payment_breakdown.amount"),
        )
        for part in raw
    )


def parse_sale(row: Mapping[str, Any]) -> SaleRecord:
    """Build a SaleRecord from a ledger row.

    The row follows the ledger's JSON shape: ``id``, ``location_id`` (or the
    legacy ``pos_number``), ``created_at``, ``total``, ``items``,
    ``payment_method`` and, for Mixed payments, ``payment_breakdown``.

    Raises:
        RecordContractError: If the row violates the record contract.

    """
    location = row.get("location_id", row.get("pos_number"))
    if location is None:
        raise RecordContractError(f"Sale {row.get('id')!r} has no location")

    method = PaymentMethod.parse(row.get("payment_method"))
    breakdown = _parse_breakdown(row.get("payment_breakdown"))
    if breakdown and method is not PaymentMethod.MIXED:
        logger.debug("Ignoring payment breakdown on non-mixed sale %s", row.get("id"))
        breakdown = ()

    return SaleRecord(
        id=str(row.get("id")),
        location_id=_to_whole(location, "location_id"),
        created_at=row.get("created_at"),
        total=_to_amount(row.get("total"), "total"),
        items=tuple(_parse_item(item) for item in row.get("items") or ()),
        payment_method=method,
        payment_breakdown=breakdown,
    )


def parse_sales(rows: Iterable[Mapping[str, Any]]) -> list[SaleRecord]:
    """Parse a sequence of ledger rows, preserving their order."""
    return [parse_sale(row) for row in rows]


# ----------------------------------------------------------------------------
# Tabular views
# ----------------------------------------------------------------------------


def _shift_label(hour: int) -> str | None:
    shift = shift_for_hour(hour)
    return shift.value if shift is not None else None


SALES_COLUMNS = [
    "sale_id",
    "location_id",
    "created_at",
    "total",
    "payment_method",
    "item_count",
    "business_day",
    "hour",
    "iso_weekday",
    "shift",
]

ITEM_LINE_COLUMNS = [
    "sale_id",
    "location_id",
    "line_no",
    "product_key",
    "product_id",
    "product_name",
    "category",
    "quantity",
    "unit_price",
    "subtotal",
]


def sales_frame(records: Iterable[SaleRecord], clock: BusinessDayClock) -> pd.DataFrame:
    """Build the sale-grain DataFrame (one row per sale, input order kept).

    Args:
        records: Sale records.
        clock: Clock used for business-day, hour and weekday columns.

    Returns:
        DataFrame with columns ``SALES_COLUMNS``. Empty input yields an
        empty frame with the same columns.

    """
    rows = [
        {
            "sale_id": r.id,
            "location_id": r.location_id,
            "created_at": r.created_at,
            "total": float(r.total),
            "payment_method": r.payment_label,
            "item_count": r.item_count,
        }
        for r in records
    ]
    if not rows:
        df = pd.DataFrame(columns=SALES_COLUMNS)
        df["total"] = df["total"].astype(float)
        df["item_count"] = df["item_count"].astype(int)
        return df

    df = pd.DataFrame(rows)
    wall = clock.local_wall_clock(df["created_at"])
    df["business_day"] = clock.business_days(df["created_at"])
    df["hour"] = wall.dt.hour
    df["iso_weekday"] = wall.dt.dayofweek + 1
    df["shift"] = df["hour"].map(_shift_label)
    return df[SALES_COLUMNS]


def item_lines_frame(records: Iterable[SaleRecord]) -> pd.DataFrame:
    """Build the item-line grain DataFrame (one row per line item)."""
    rows = [
        {
            "sale_id": r.id,
            "location_id": r.location_id,
            "line_no": line_no,
            "product_key": item.product_key,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "category": item.category,
            "quantity": item.quantity,
            "unit_price": float(item.unit_price),
            "subtotal": float(item.subtotal),
        }
        for r in records
        for line_no, item in enumerate(r.items)
    ]
    if not rows:
        df = pd.DataFrame(columns=ITEM_LINE_COLUMNS)
        df["quantity"] = df["quantity"].astype(int)
        df["subtotal"] = df["subtotal"].astype(float)
        return df
    return pd.DataFrame(rows, columns=ITEM_LINE_COLUMNS)
