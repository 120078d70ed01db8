"""Command-line interface for the analytics engine.

Examples:
  # Network dashboard for the last 7 days
  pos-analytics dashboard --file sales.json --range last_7_days

  # One location, this month, with a custom config
  pos-analytics dashboard --file sales.json --range current_month --location 2 \
      --config analytics.json

  # Forecast with live weather and the calendar tourist-flow classifier
  pos-analytics forecast --file sales.json --location 1

  # Forecast with fixed tags (no network calls)
  pos-analytics forecast --file sales.json --location 1 --weather rainy --flow arrival
"""

from __future__ import annotations

import argparse
import logging
import sys

import pandas as pd

from pos_analytics.config import AnalyticsConfig
from pos_analytics.dashboard import build_dashboard
from pos_analytics.exceptions import PosAnalyticsError
from pos_analytics.forecasting.api import run_forecast
from pos_analytics.formatters.console import (
    format_dashboard_for_console,
    format_forecast_for_console,
)
from pos_analytics.ledger import JsonFileLedger
from pos_analytics.ranges import RangeSelector
from pos_analytics.signals import (
    CalendarTouristFlow,
    OpenMeteoWeather,
    StaticFlow,
    StaticWeather,
    TouristFlow,
    WeatherCondition,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pos-analytics",
        description="Sales analytics and forecasting for a multi-location point of sale.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--file", required=True, help="Path to the JSON export of sales")
    common.add_argument("--config", help="Path to a JSON config file (optional)")
    common.add_argument("--location", type=int, help="Location id (default: whole network)")
    common.add_argument(
        "--now",
        help="Reference instant in ISO-8601 with offset (default: current time)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    dashboard = sub.add_parser("dashboard", parents=[common], help="Show dashboard metrics")
    dashboard.add_argument(
        "--range",
        default=RangeSelector.LAST_7_DAYS.value,
        choices=[s.value for s in RangeSelector],
        help="Date range (default: last_7_days)",
    )
    dashboard.add_argument(
        "--top",
        type=int,
        help="Rows in product rankings (default: 15 for the network, 10 for one location)",
    )

    forecast = sub.add_parser("forecast", parents=[common], help="Show the sales outlook")
    forecast.add_argument(
        "--weather",
        choices=[w.value for w in WeatherCondition],
        help="Fixed weather tag (default: live lookup)",
    )
    forecast.add_argument(
        "--flow",
        choices=[f.value for f in TouristFlow],
        help="Fixed tourist-flow tag (default: calendar classifier)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Returns:
        Process exit status (0 on success, 1 on engine errors).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = AnalyticsConfig.from_json(args.config) if args.config else AnalyticsConfig()
        now = args.now or pd.Timestamp.now(tz="UTC")
        ledger = JsonFileLedger(args.file)
        records = (
            ledger.fetch_by_location(args.location)
            if args.location is not None
            else ledger.fetch_all()
        )

        if args.command == "dashboard":
            result = build_dashboard(
                records,
                args.range,
                now,
                config=config,
                location_id=args.location,
                top_limit=args.top,
            )
            print(format_dashboard_for_console(result))
        else:
            clock = config.clock()
            weather = (
                StaticWeather(WeatherCondition(args.weather))
                if args.weather
                else OpenMeteoWeather(timezone=config.timezone)
            )
            flow = (
                StaticFlow(TouristFlow(args.flow))
                if args.flow
                else CalendarTouristFlow(clock=clock, now=lambda: now)
            )
            result = run_forecast(
                records,
                now,
                location_id=args.location,
                weather=weather,
                flow=flow,
                clock=clock,
            )
            print(format_forecast_for_console(result))
    except PosAnalyticsError as e:
        logger.error("%s", e)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
