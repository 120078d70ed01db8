"""Output formatters for dashboards and forecasts."""

from pos_analytics.formatters.console import format_dashboard_for_console, format_forecast_for_console

__all__ = ["format_dashboard_for_console", "format_forecast_for_console"]
