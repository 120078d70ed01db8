"""Sales forecasting module.

This module provides the heuristic short-term outlook: an expected growth
percentage against the historical baseline plus a qualitative per-segment
status and tip.

Example:
    >>> from pos_analytics import LineItem, SaleRecord
    >>> from pos_analytics.forecasting import run_forecast
    >>> from pos_analytics.signals import StaticFlow, StaticWeather, TouristFlow
    >>>
    >>> def sale(created_at, total):
    ...     item = LineItem("p1", "Alfajor", 1, total)
    ...     return SaleRecord("s", 1, created_at, total, (item,))
    >>>
    >>> records = [
    ...     sale("2025-01-03T15:00:00Z", 200.0),  # Friday
    ...     sale("2025-01-06T15:00:00Z", 100.0),  # Monday
    ...     sale("2025-01-10T15:00:00Z", 200.0),  # Friday
    ... ]
    >>> result = run_forecast(
    ...     records,
    ...     now="2025-01-17T15:00:00Z",  # Friday
    ...     location_id=1,
    ...     weather=StaticWeather(),
    ...     flow=StaticFlow(TouristFlow.ARRIVAL),
    ... )
    >>> result.growth_percent
    20

"""

from pos_analytics.forecasting.api import (
    ForecastResult,
    GrowthEstimate,
    build_forecast,
    estimate_growth,
    run_forecast,
)

__all__ = ["ForecastResult", "GrowthEstimate", "build_forecast", "estimate_growth", "run_forecast"]
