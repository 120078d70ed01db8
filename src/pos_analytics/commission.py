"""Commission model: net-of-fees revenue by payment method.

Each payment method carries a fixed processor commission rate in ``[0, 1)``.
Net revenue subtracts that commission from each sale's total.

Mixed payments:
    A Mixed sale is settled with two methods. Its commission is the sum of
    each part's own rate applied to that part's amount, never a single
    "Mixed" rate applied to the full total.

Unknown or missing payment methods are charged no commission.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

import pandas as pd

from pos_analytics.exceptions import ConfigError
from pos_analytics.records import PaymentMethod, SaleRecord, payment_label

logger = logging.getLogger(__name__)

DEFAULT_COMMISSION_RATES: dict[PaymentMethod, float] = {
    PaymentMethod.CASH: 0.0,
    PaymentMethod.TRANSFER: 0.0,
    PaymentMethod.QR: 0.008,
    PaymentMethod.DEBIT: 0.015,
    PaymentMethod.CREDIT: 0.035,
}


class CommissionModel:
    """Static payment method → commission rate lookup.

    Example:
        >>> model = CommissionModel()
        >>> model.rate(PaymentMethod.CREDIT)
        0.035
        >>> model.rate(None)
        0.0

    """

    def __init__(self, rates: Mapping[PaymentMethod, float] | None = None) -> None:
        rates = DEFAULT_COMMISSION_RATES if rates is None else rates
        for method, rate in rates.items():
            if method is PaymentMethod.MIXED:
                raise ConfigError("Mixed payments have no rate of their own")
            if not 0.0 <= rate < 1.0:
                raise ConfigError(f"Commission rate for {method} must be in [0, 1), got {rate}")
        self._rates = dict(rates)

    def rate(self, method: PaymentMethod | None) -> float:
        """Commission rate for a method; 0 for unknown/missing methods."""
        if method is None:
            return 0.0
        return self._rates.get(method, 0.0)

    def commission_for(self, record: SaleRecord) -> float:
        """Commission charged on a single sale."""
        if record.payment_method is PaymentMethod.MIXED:
            if not record.payment_breakdown:
                logger.warning("Mixed sale %s has no payment breakdown, no commission applied", record.id)
                return 0.0
            return sum(part.amount * self.rate(part.method) for part in record.payment_breakdown)
        return record.total * self.rate(record.payment_method)

    def net_for(self, record: SaleRecord) -> float:
        return record.total - self.commission_for(record)

    def net_revenue(self, records: Iterable[SaleRecord]) -> float:
        """Sum of totals net of processor commissions."""
        return float(sum(self.net_for(r) for r in records))

    def commission_by_method(self, records: Iterable[SaleRecord]) -> pd.DataFrame:
        """Gross, commission and net amounts per payment method.

        Mixed sales are split into their component methods so that each
        amount is charged at its own rate.

        Returns:
            DataFrame with columns: payment_method, gross, commission, net;
            sorted by gross descending.

        """
        rows = []
        for r in records:
            if r.payment_method is PaymentMethod.MIXED and r.payment_breakdown:
                for part in r.payment_breakdown:
                    commission = part.amount * self.rate(part.method)
                    rows.append((payment_label(part.method), part.amount, commission))
            else:
                rows.append((r.payment_label, r.total, self.commission_for(r)))

        if not rows:
            return pd.DataFrame(columns=["payment_method", "gross", "commission", "net"])

        df = pd.DataFrame(rows, columns=["payment_method", "gross", "commission"])
        df = df.groupby("payment_method", sort=False, as_index=False)[["gross", "commission"]].sum()
        df["net"] = df["gross"] - df["commission"]
        return df.sort_values("gross", ascending=False, kind="stable").reset_index(drop=True)


def net_revenue(records: Iterable[SaleRecord], model: CommissionModel | None = None) -> float:
    """Net revenue using the given model (default rates when omitted)."""
    return (model or CommissionModel()).net_revenue(records)
