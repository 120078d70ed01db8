"""Public API for the sales forecaster.

The forecaster is a heuristic, not a statistical model:

1. Group historical sales by business day and total each day.
2. ``global_average``: mean of all daily totals (0 without history).
3. Similar days: historical days sharing the current ISO weekday and
   calendar month.
4. ``context_average``: mean of the similar days, falling back to the
   global average when there are none.
5. ``growth_percent = round((context / global - 1) * 100)``, 0 when the
   global average is not positive.
6. A qualitative per-segment outlook and a tip from weather, tourist flow
   and financial-day signals (see ``pos_analytics.forecasting.tips``).

History is every business day strictly before the business day of ``now``;
the running day is partial and would drag the averages down.

Everything here is a pure function of its inputs, except ``run_forecast``
which also asks the weather and flow collaborators for their tags.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pos_analytics.clock import BusinessDayClock
from pos_analytics.forecasting.history import daily_revenue, find_similar_days, growth_percent
from pos_analytics.forecasting.tips import (
    Segment,
    SegmentStatus,
    is_financial_day,
    segment_outlook,
    tip_for,
)
from pos_analytics.records import SaleRecord
from pos_analytics.signals import (
    FlowProvider,
    TouristFlow,
    WeatherCondition,
    WeatherProvider,
    safe_current_condition,
    safe_tourist_flow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthEstimate:
    """Quantitative part of the forecast.

    Attributes:
        global_average: Mean daily revenue over all history.
        context_average: Mean daily revenue over the similar days (or the
            global average when there are none).
        growth_percent: Rounded expected growth of the context over the
            global baseline.
        history_days: Number of historical business days with sales.
        similar_days: The similar days used for the context average.
    """

    global_average: float
    context_average: float
    growth_percent: int
    history_days: int
    similar_days: tuple = ()


@dataclass
class ForecastResult:
    """Result of the forecaster.

    Attributes:
        segments: Status per segment of the day (morning, afternoon, night).
        tip: Recommendation text.
        growth_percent: Expected growth over the historical baseline.
        metadata: Signals and baselines the forecast was computed from.
    """

    segments: dict[Segment, SegmentStatus]
    tip: str
    growth_percent: int
    metadata: dict[str, object] = field(default_factory=dict)


def estimate_growth(
    records: Iterable[SaleRecord],
    now: Any,
    clock: BusinessDayClock | None = None,
    location_id: int | None = None,
) -> GrowthEstimate:
    """Compare the current weekday/month context against the global average.

    Args:
        records: Historical sale records (any order).
        now: Reference instant.
        clock: Business-day clock (default settings when omitted).
        location_id: Restrict history to one location (None for the network).

    Returns:
        GrowthEstimate. With no history every figure is 0.

    """
    clock = clock or BusinessDayClock()
    if location_id is not None:
        records = [r for r in records if r.location_id == location_id]

    today = clock.business_day_key(now)
    daily = daily_revenue(records, clock, before=today)

    if daily.empty:
        logger.debug("No sales history before %s, growth baseline is 0", today)
        return GrowthEstimate(0.0, 0.0, 0, 0, ())

    global_average = float(daily.mean())
    similar = find_similar_days(daily, today)
    context_average = float(daily.loc[similar].mean()) if similar else global_average

    return GrowthEstimate(
        global_average=global_average,
        context_average=context_average,
        growth_percent=growth_percent(context_average, global_average),
        history_days=len(daily),
        similar_days=tuple(similar),
    )


def build_forecast(
    records: Iterable[SaleRecord],
    now: Any,
    weather: WeatherCondition,
    flow: TouristFlow,
    location_id: int | None = None,
    clock: BusinessDayClock | None = None,
) -> ForecastResult:
    """Build the forecast from already-resolved signal tags.

    Args:
        records: Historical sale records.
        now: Reference instant.
        weather: Weather tag for the location.
        flow: Tourist-flow tag.
        location_id: Restrict history to one location (None for the network).
        clock: Business-day clock.

    Returns:
        ForecastResult. The growth figure always comes from the historical
        estimate, never from the qualitative outlook.

    """
    clock = clock or BusinessDayClock()
    weather = WeatherCondition(weather)
    flow = TouristFlow(flow)

    estimate = estimate_growth(records, now, clock=clock, location_id=location_id)
    today = clock.business_day_key(now)
    financial_day = is_financial_day(clock.to_local(now).date())

    result = ForecastResult(
        segments=segment_outlook(weather, flow, financial_day),
        tip=tip_for(weather, flow, financial_day),
        growth_percent=estimate.growth_percent,
        metadata={
            "business_day": today,
            "location_id": location_id,
            "weather": weather.value,
            "flow": flow.value,
            "financial_day": financial_day,
            "history_days": estimate.history_days,
            "similar_days": list(estimate.similar_days),
            "global_average": estimate.global_average,
            "context_average": estimate.context_average,
        },
    )
    logger.info(
        "Forecast for %s (location %s): growth %+d%%, weather=%s, flow=%s",
        today, location_id if location_id is not None else "all", result.growth_percent,
        weather.value, flow.value,
    )
    return result


def run_forecast(
    records: Iterable[SaleRecord],
    now: Any,
    location_id: int | None = None,
    weather: WeatherProvider | None = None,
    flow: FlowProvider | None = None,
    clock: BusinessDayClock | None = None,
) -> ForecastResult:
    """Run the forecaster, asking the collaborators for the signal tags.

    Collaborator failures degrade to neutral tags (cloudy, standard) and
    never abort the forecast. Without a location the weather tag is neutral.
    """
    weather_tag = safe_current_condition(weather, location_id)
    flow_tag = safe_tourist_flow(flow)
    return build_forecast(
        records,
        now,
        weather=weather_tag,
        flow=flow_tag,
        location_id=location_id,
        clock=clock,
    )
