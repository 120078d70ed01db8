"""Simple example: network and per-location dashboards plus a forecast.

This builds a small in-memory ledger so it runs without any data files.
"""

from pos_analytics import InMemoryLedger, LineItem, PaymentMethod, SaleRecord, build_dashboard
from pos_analytics.forecasting import run_forecast
from pos_analytics.formatters.console import format_dashboard_for_console, format_forecast_for_console
from pos_analytics.signals import StaticFlow, StaticWeather, TouristFlow, WeatherCondition

now = "2025-01-17T15:00:00Z"  # Friday, 12:00 local

# Setup
sales = [
    SaleRecord(
        id=str(i),
        location_id=1 + i % 3,
        created_at=f"2025-01-{day:02d}T{hour:02d}:30:00Z",
        total=qty * 1500.0,
        items=(LineItem("alf-01", "Alfajor triple", qty, 1500.0, category="Golosinas"),),
        payment_method=method,
    )
    for i, (day, hour, qty, method) in enumerate(
        [
            (3, 14, 2, PaymentMethod.CASH),
            (3, 23, 4, PaymentMethod.CREDIT),
            (6, 13, 1, PaymentMethod.QR),
            (10, 15, 6, PaymentMethod.DEBIT),
            (10, 22, 3, PaymentMethod.CASH),
            (14, 16, 2, PaymentMethod.TRANSFER),
            (16, 20, 5, PaymentMethod.CREDIT),
            (17, 13, 1, PaymentMethod.CASH),
        ]
    )
]
ledger = InMemoryLedger(sales)

# Example 1: Whole network, last 30 days
print("Example 1: Network dashboard")
print("-" * 60)
print(format_dashboard_for_console(build_dashboard(ledger.fetch_all(), "last_30_days", now)))
print()

# Example 2: One location, current month
print("Example 2: Location 2, current month")
print("-" * 60)
result = build_dashboard(ledger.fetch_by_location(2), "current_month", now, location_id=2)
print(f"Revenue: {result.totals.revenue:.2f}  Net: {result.net_revenue:.2f}")
print(result.commissions)
print()

# Example 3: Forecast with fixed signals (no network calls)
print("Example 3: Forecast for location 1")
print("-" * 60)
forecast = run_forecast(
    ledger.fetch_all(),
    now,
    location_id=1,
    weather=StaticWeather(WeatherCondition.SUNNY),
    flow=StaticFlow(TouristFlow.ARRIVAL),
)
print(format_forecast_for_console(forecast))
