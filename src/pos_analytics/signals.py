"""External categorical signals: weather and tourist flow.

The forecaster only consumes coarse tags from two collaborators:

- Weather: ``current_condition(location_id)`` and
  ``historical_condition(location_id, day)`` → sunny / cloudy / rainy.
- Flow: ``tourist_flow()`` → arrival / departure / high / medium / standard.

Both are abstracted behind small Protocols so the forecaster can be driven
by fixed stubs in tests. A collaborator failure never aborts the pipeline:
``safe_current_condition`` and ``safe_tourist_flow`` degrade to the neutral
tags (cloudy, standard).

Two real implementations are provided:

- ``OpenMeteoWeather`` queries the Open-Meteo HTTP API and caches every
  successful lookup by (location, day), read-through, with no invalidation.
- ``CalendarTouristFlow`` classifies the coastal season from the calendar.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Protocol

import pandas as pd
import requests

from pos_analytics.clock import DEFAULT_TIMEZONE, BusinessDayClock

logger = logging.getLogger(__name__)


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"


class TouristFlow(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"
    HIGH = "high"
    MEDIUM = "medium"
    STANDARD = "standard"


NEUTRAL_WEATHER = WeatherCondition.CLOUDY
NEUTRAL_FLOW = TouristFlow.STANDARD


class WeatherProvider(Protocol):
    """Capability interface of the weather collaborator."""

    def current_condition(self, location_id: int) -> WeatherCondition: ...

    def historical_condition(self, location_id: int, day: date) -> WeatherCondition: ...


class FlowProvider(Protocol):
    """Capability interface of the tourist-flow collaborator."""

    def tourist_flow(self) -> TouristFlow: ...


@dataclass
class StaticWeather:
    """Weather stub returning fixed conditions, optionally per location."""

    condition: WeatherCondition = NEUTRAL_WEATHER
    by_location: dict[int, WeatherCondition] = field(default_factory=dict)

    def current_condition(self, location_id: int) -> WeatherCondition:
        return self.by_location.get(location_id, self.condition)

    def historical_condition(self, location_id: int, day: date) -> WeatherCondition:
        return self.current_condition(location_id)


@dataclass
class StaticFlow:
    """Tourist-flow stub returning a fixed tag."""

    flow: TouristFlow = NEUTRAL_FLOW

    def tourist_flow(self) -> TouristFlow:
        return self.flow


def safe_current_condition(provider: WeatherProvider | None, location_id: int | None) -> WeatherCondition:
    """Ask the weather collaborator, degrading to the neutral tag on any failure."""
    if provider is None or location_id is None:
        return NEUTRAL_WEATHER
    try:
        return WeatherCondition(provider.current_condition(location_id))
    except Exception as e:
        logger.warning(
            "Weather lookup failed for location %s: %s. Using '%s'.",
            location_id, e, NEUTRAL_WEATHER.value,
        )
        return NEUTRAL_WEATHER


def safe_tourist_flow(provider: FlowProvider | None) -> TouristFlow:
    """Ask the flow collaborator, degrading to the neutral tag on any failure."""
    if provider is None:
        return NEUTRAL_FLOW
    try:
        return TouristFlow(provider.tourist_flow())
    except Exception as e:
        logger.warning("Tourist flow lookup failed: %s. Using '%s'.", e, NEUTRAL_FLOW.value)
        return NEUTRAL_FLOW


# ------------------------------------------------------------
# Open-Meteo weather collaborator
# ------------------------------------------------------------

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

# (latitude, longitude) per location
DEFAULT_COORDINATES: dict[int, tuple[float, float]] = {
    1: (-36.60, -56.70),  # Costa del Este
    2: (-37.33, -57.02),  # Mar de las Pampas
    3: (-37.03, -56.83),  # Costa Esmeralda
}


def condition_from_wmo_code(code: int) -> WeatherCondition:
    """Collapse a WMO weather interpretation code into the three-value tag.

    0-1 clear or mainly clear → sunny; 2-3 and fog (45, 48) → cloudy;
    everything else (drizzle, rain, snow, showers, storms) → rainy.
    """
    if code in (0, 1):
        return WeatherCondition.SUNNY
    if code in (2, 3, 45, 48):
        return WeatherCondition.CLOUDY
    return WeatherCondition.RAINY


class OpenMeteoWeather:
    """Weather collaborator backed by the Open-Meteo API.

    Lookups are cached per (location_id, local date). Failed lookups are
    not cached and fall back to the neutral tag.
    """

    def __init__(
        self,
        coordinates: Mapping[int, tuple[float, float]] | None = None,
        timezone: str = DEFAULT_TIMEZONE,
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self.coordinates = dict(coordinates or DEFAULT_COORDINATES)
        self.timezone = timezone
        self.session = session or requests.Session()
        self.timeout = timeout
        self._cache: dict[tuple[int, date], WeatherCondition] = {}

    def current_condition(self, location_id: int) -> WeatherCondition:
        today = pd.Timestamp.now(tz=self.timezone).date()
        return self._lookup(location_id, today, current=True)

    def historical_condition(self, location_id: int, day: date) -> WeatherCondition:
        return self._lookup(location_id, day, current=False)

    def _lookup(self, location_id: int, day: date, current: bool) -> WeatherCondition:
        key = (location_id, day)
        if key in self._cache:
            return self._cache[key]

        if location_id not in self.coordinates:
            logger.warning("No coordinates for location %s, using '%s'", location_id, NEUTRAL_WEATHER.value)
            return NEUTRAL_WEATHER

        latitude, longitude = self.coordinates[location_id]
        params: dict[str, Any] = {
            "latitude": latitude,
            "longitude": longitude,
            "timezone": self.timezone,
        }
        if current:
            url = OPEN_METEO_FORECAST_URL
            params["current"] = "weather_code"
        else:
            url = OPEN_METEO_ARCHIVE_URL
            params.update(daily="weather_code", start_date=day.isoformat(), end_date=day.isoformat())

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            code = payload["current"]["weather_code"] if current else payload["daily"]["weather_code"][0]
            condition = condition_from_wmo_code(int(code))
        except requests.RequestException as e:
            logger.warning(
                "Failed to fetch weather for location %s on %s: %s. Using '%s'.",
                location_id, day, e, NEUTRAL_WEATHER.value,
            )
            return NEUTRAL_WEATHER
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(
                "Invalid response format from weather API for location %s on %s: %s. Using '%s'.",
                location_id, day, e, NEUTRAL_WEATHER.value,
            )
            return NEUTRAL_WEATHER

        self._cache[key] = condition
        logger.info("Fetched weather for location %s on %s: %s", location_id, day, condition.value)
        return condition


# ------------------------------------------------------------
# Calendar-based tourist flow collaborator
# ------------------------------------------------------------

HIGH_SEASON_MONTHS = {12, 1, 2}
SHOULDER_MONTHS = {3, 11}


def classify_tourist_flow(day: date) -> TouristFlow:
    """Classify the coastal tourist flow for a business day.

    High season (December to February):
        Friday → arrival, Sunday → departure, every other day → high.
    Shoulder months (March, November):
        Friday to Sunday → medium, weekdays → standard.
    Off season:
        Saturday → medium, every other day → standard.
    """
    weekday = day.weekday()
    if day.month in HIGH_SEASON_MONTHS:
        if weekday == 4:
            return TouristFlow.ARRIVAL
        if weekday == 6:
            return TouristFlow.DEPARTURE
        return TouristFlow.HIGH
    if day.month in SHOULDER_MONTHS:
        return TouristFlow.MEDIUM if weekday >= 4 else TouristFlow.STANDARD
    return TouristFlow.MEDIUM if weekday == 5 else TouristFlow.STANDARD


@dataclass
class CalendarTouristFlow:
    """Flow collaborator that classifies the current business day.

    Attributes:
        clock: Clock used to resolve the current business day.
        now: Optional callable returning the reference instant (defaults to
            the wall clock).
    """

    clock: BusinessDayClock = field(default_factory=BusinessDayClock)
    now: Callable[[], Any] | None = None

    def tourist_flow(self) -> TouristFlow:
        instant = self.now() if self.now is not None else pd.Timestamp.now(tz="UTC")
        return classify_tourist_flow(self.clock.business_day_key(instant))
