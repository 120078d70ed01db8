"""POS Analytics - sales analytics and forecasting for a multi-location point of sale.

This package turns a raw, unordered set of immutable sale records into
business metrics and a short-term outlook:

- **Business-day clock**: 03:00 cutoff, shifts and weekdays in the
  locations' timezone
- **Aggregator**: totals, product rankings, payment methods, shifts,
  weekdays and daily series, network-wide and per location
- **Commission model**: revenue net of processor fees
- **Range filter**: relative windows and period-over-period deltas
- **Forecaster**: heuristic growth estimate plus a qualitative outlook

Module Structure:
    pos_analytics.records: Sale records and their tabular views
    pos_analytics.clock: Business-day clock
    pos_analytics.aggregate: Aggregator
    pos_analytics.commission: Commission model
    pos_analytics.ranges: Range filter
    pos_analytics.forecasting: Forecaster
    pos_analytics.signals: Weather and tourist-flow collaborators
    pos_analytics.dashboard: One-call dashboard assembly

Quick Start:
    >>> from pos_analytics import AnalyticsConfig, JsonFileLedger, build_dashboard
    >>> from pos_analytics.forecasting import run_forecast
    >>>
    >>> ledger = JsonFileLedger("sales.json")
    >>> dashboard = build_dashboard(ledger.fetch_all(), "last_7_days", now="2025-01-17T15:00:00Z")
    >>> dashboard.totals.revenue
    >>> dashboard.top_products.head()
    >>>
    >>> result = run_forecast(ledger.fetch_all(), now="2025-01-17T15:00:00Z", location_id=1)
    >>> result.growth_percent
"""

__version__ = "0.1.0"

from pos_analytics.clock import BusinessDayClock
from pos_analytics.commission import CommissionModel
from pos_analytics.config import AnalyticsConfig
from pos_analytics.dashboard import DashboardResult, build_dashboard
from pos_analytics.exceptions import (
    ConfigError,
    DataQualityError,
    PosAnalyticsError,
    RecordContractError,
)
from pos_analytics.ledger import InMemoryLedger, JsonFileLedger
from pos_analytics.records import LineItem, PaymentMethod, PaymentSplit, SaleRecord

__all__ = [
    "AnalyticsConfig",
    "BusinessDayClock",
    "CommissionModel",
    "ConfigError",
    "DashboardResult",
    "DataQualityError",
    "InMemoryLedger",
    "JsonFileLedger",
    "LineItem",
    "PaymentMethod",
    "PaymentSplit",
    "PosAnalyticsError",
    "RecordContractError",
    "SaleRecord",
    "__version__",
    "build_dashboard",
]
