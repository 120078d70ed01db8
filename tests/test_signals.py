"""Tests for the weather and tourist-flow collaborators."""

from datetime import date

import pytest
import requests

from pos_analytics.signals import (
    CalendarTouristFlow,
    OpenMeteoWeather,
    StaticFlow,
    StaticWeather,
    TouristFlow,
    WeatherCondition,
    classify_tourist_flow,
    condition_from_wmo_code,
    safe_current_condition,
    safe_tourist_flow,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class FakeSession:
    """Records calls and replays queued responses (or raises queued errors)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.parametrize(
    "code, expected",
    [
        (0, WeatherCondition.SUNNY),
        (1, WeatherCondition.SUNNY),
        (3, WeatherCondition.CLOUDY),
        (45, WeatherCondition.CLOUDY),
        (61, WeatherCondition.RAINY),
        (95, WeatherCondition.RAINY),
    ],
)
def test_condition_from_wmo_code(code: int, expected: WeatherCondition) -> None:
    assert condition_from_wmo_code(code) == expected


def test_historical_condition_is_cached() -> None:
    session = FakeSession(FakeResponse({"daily": {"weather_code": [61]}}))
    weather = OpenMeteoWeather(session=session)

    assert weather.historical_condition(1, date(2025, 1, 10)) == WeatherCondition.RAINY
    assert weather.historical_condition(1, date(2025, 1, 10)) == WeatherCondition.RAINY
    assert len(session.calls) == 1, "second lookup should be served from the cache"

    url, params = session.calls[0]
    assert "archive" in url
    assert params["start_date"] == "2025-01-10"


def test_current_condition() -> None:
    session = FakeSession(FakeResponse({"current": {"weather_code": 0}}))
    weather = OpenMeteoWeather(session=session)
    assert weather.current_condition(2) == WeatherCondition.SUNNY
    assert session.calls[0][1]["current"] == "weather_code"


def test_request_failure_falls_back_and_is_not_cached() -> None:
    session = FakeSession(
        requests.ConnectionError("no route to host"),
        FakeResponse({"daily": {"weather_code": [0]}}),
    )
    weather = OpenMeteoWeather(session=session)

    assert weather.historical_condition(1, date(2025, 1, 10)) == WeatherCondition.CLOUDY
    assert weather.historical_condition(1, date(2025, 1, 10)) == WeatherCondition.SUNNY
    assert len(session.calls) == 2


def test_http_error_and_bad_payload_fall_back() -> None:
    session = FakeSession(FakeResponse({}, status_code=503), FakeResponse({"daily": {}}))
    weather = OpenMeteoWeather(session=session)

    assert weather.historical_condition(1, date(2025, 1, 10)) == WeatherCondition.CLOUDY
    assert weather.historical_condition(1, date(2025, 1, 11)) == WeatherCondition.CLOUDY


def test_unknown_location_falls_back_without_request() -> None:
    session = FakeSession()
    weather = OpenMeteoWeather(session=session)
    assert weather.historical_condition(42, date(2025, 1, 10)) == WeatherCondition.CLOUDY
    assert session.calls == []


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2025, 1, 17), TouristFlow.ARRIVAL),  # Friday, high season
        (date(2025, 1, 19), TouristFlow.DEPARTURE),  # Sunday, high season
        (date(2025, 1, 15), TouristFlow.HIGH),  # Wednesday, high season
        (date(2025, 3, 8), TouristFlow.MEDIUM),  # Saturday, shoulder
        (date(2025, 3, 12), TouristFlow.STANDARD),  # Wednesday, shoulder
        (date(2025, 6, 14), TouristFlow.MEDIUM),  # Saturday, off season
        (date(2025, 6, 13), TouristFlow.STANDARD),  # Friday, off season
    ],
)
def test_classify_tourist_flow(day: date, expected: TouristFlow) -> None:
    assert classify_tourist_flow(day) == expected


def test_calendar_tourist_flow_uses_business_day() -> None:
    """01:00 local on Saturday still belongs to Friday's business day."""
    flow = CalendarTouristFlow(now=lambda: "2025-01-18T04:00:00Z")
    assert flow.tourist_flow() == TouristFlow.ARRIVAL


def test_static_stubs() -> None:
    weather = StaticWeather(WeatherCondition.SUNNY, by_location={2: WeatherCondition.RAINY})
    assert weather.current_condition(1) == WeatherCondition.SUNNY
    assert weather.current_condition(2) == WeatherCondition.RAINY
    assert StaticFlow().tourist_flow() == TouristFlow.STANDARD


def test_safe_lookups_degrade_on_invalid_tags() -> None:
    class BadWeather:
        def current_condition(self, location_id):
            return "foggy"

    class BadFlow:
        def tourist_flow(self):
            return "stampede"

    assert safe_current_condition(BadWeather(), 1) == WeatherCondition.CLOUDY
    assert safe_tourist_flow(BadFlow()) == TouristFlow.STANDARD
    assert safe_current_condition(None, 1) == WeatherCondition.CLOUDY
