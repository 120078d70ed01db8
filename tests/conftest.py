"""Shared fixtures for the analytics test suite.

All timestamps are written in UTC. The reference timezone
(America/Argentina/Buenos_Aires) is UTC-3 with no daylight saving time, so
local 12:00 is 15:00Z and local 02:59 is 05:59Z.
"""

from itertools import count

import pytest

from pos_analytics.clock import BusinessDayClock
from pos_analytics.records import LineItem, PaymentMethod, PaymentSplit, SaleRecord


@pytest.fixture
def clock() -> BusinessDayClock:
    return BusinessDayClock()


@pytest.fixture
def make_sale():
    """Factory for sale records with sensible defaults.

    A sale without explicit items gets a single line whose subtotal equals
    the requested total.
    """
    ids = count(1)

    def _make_sale(
        created_at,
        total=None,
        location_id=1,
        items=None,
        payment_method=PaymentMethod.CASH,
        breakdown=(),
    ) -> SaleRecord:
        if items is None:
            amount = 10.0 if total is None else total
            items = [LineItem("p1", "Alfajor", 1, amount)]
        if total is None:
            total = sum(item.subtotal for item in items)
        return SaleRecord(
            id=f"sale-{next(ids)}",
            location_id=location_id,
            created_at=created_at,
            total=total,
            items=tuple(items),
            payment_method=payment_method,
            payment_breakdown=tuple(PaymentSplit(m, a) for m, a in breakdown),
        )

    return _make_sale


@pytest.fixture
def scenario_sales(make_sale) -> list[SaleRecord]:
    """Three cash sales on one business day, one credit sale the day before.

    2024-03-15 local: $10, $20, $30 cash (morning, midday, night).
    2024-03-14 local: $40 credit (afternoon).
    """
    return [
        make_sale("2024-03-15T13:00:00Z", 10.0),  # 10:00 local
        make_sale("2024-03-15T16:00:00Z", 20.0),  # 13:00 local
        make_sale("2024-03-16T02:30:00Z", 30.0),  # 23:30 local
        make_sale("2024-03-14T20:00:00Z", 40.0, payment_method=PaymentMethod.CREDIT),  # 17:00 local
    ]
