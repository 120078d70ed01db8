"""Qualitative outlook: per-segment status and the day's tip.

The outlook combines three categorical signals:

- the weather tag for the location (sunny / cloudy / rainy),
- the tourist-flow tag (arrival / departure / high / medium / standard),
- whether the date is a financial inflection day (paydays and billing
  cycles: the 1st, 7th/8th, 14th/15th, 21st/22nd and 30th).

Each segment of the day (morning, afternoon, night) gets a score from a flow
baseline plus a weather adjustment, plus one point on financial days. The
tip text comes from a fixed (flow, weather) table, with an extra line on
financial days.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pos_analytics.signals import TouristFlow, WeatherCondition

FINANCIAL_INFLECTION_DAYS = frozenset({1, 7, 8, 14, 15, 21, 22, 30})


class Segment(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


class SegmentStatus(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


SEGMENTS = [Segment.MORNING, Segment.AFTERNOON, Segment.NIGHT]

# Scores in segment order: morning, afternoon, night
FLOW_BASELINE: dict[TouristFlow, tuple[int, int, int]] = {
    TouristFlow.ARRIVAL: (0, 1, 2),
    TouristFlow.DEPARTURE: (2, 1, 0),
    TouristFlow.HIGH: (1, 2, 2),
    TouristFlow.MEDIUM: (1, 1, 1),
    TouristFlow.STANDARD: (0, 1, 0),
}

# Sunny days pull visitors to the beach in the afternoon; rain pushes them
# into the shops.
WEATHER_ADJUSTMENT: dict[WeatherCondition, tuple[int, int, int]] = {
    WeatherCondition.SUNNY: (1, -1, 0),
    WeatherCondition.CLOUDY: (0, 0, 0),
    WeatherCondition.RAINY: (-1, 1, 0),
}

TIPS: dict[tuple[TouristFlow, WeatherCondition], str] = {
    (TouristFlow.ARRIVAL, WeatherCondition.SUNNY): (
        "Llegan turistas con buen clima: reforzá el stock de playa y bebidas para la noche."
    ),
    (TouristFlow.ARRIVAL, WeatherCondition.CLOUDY): (
        "Día de llegada: prepará la caja para una noche fuerte y exhibí productos de primera compra."
    ),
    (TouristFlow.ARRIVAL, WeatherCondition.RAINY): (
        "Llegadas con lluvia: la gente se refugia en los locales, sumá personal por la tarde."
    ),
    (TouristFlow.DEPARTURE, WeatherCondition.SUNNY): (
        "Día de salida con sol: la venta se concentra temprano, abrí puntual y ofrecé souvenirs."
    ),
    (TouristFlow.DEPARTURE, WeatherCondition.CLOUDY): (
        "Los turistas se van: mañana activa, después bajá el ritmo y aprovechá para reponer."
    ),
    (TouristFlow.DEPARTURE, WeatherCondition.RAINY): (
        "Salida con lluvia: ventas de último momento por la mañana, tarde tranquila."
    ),
    (TouristFlow.HIGH, WeatherCondition.SUNNY): (
        "Temporada alta y sol: la tarde se vacía por la playa, concentrá el personal a la noche."
    ),
    (TouristFlow.HIGH, WeatherCondition.CLOUDY): (
        "Temporada alta con nublado: jornada pareja y fuerte, mantené todas las cajas abiertas."
    ),
    (TouristFlow.HIGH, WeatherCondition.RAINY): (
        "Temporada alta y lluvia: esperá el pico del día por la tarde, reforzá reposición."
    ),
    (TouristFlow.MEDIUM, WeatherCondition.SUNNY): (
        "Movimiento medio con sol: buena mañana, promociones suaves para la tarde."
    ),
    (TouristFlow.MEDIUM, WeatherCondition.CLOUDY): (
        "Movimiento medio: jornada estable, buen momento para ordenar el salón."
    ),
    (TouristFlow.MEDIUM, WeatherCondition.RAINY): (
        "Movimiento medio con lluvia: la tarde puede sorprender, tené la vidriera lista."
    ),
    (TouristFlow.STANDARD, WeatherCondition.SUNNY): (
        "Día normal con sol: venta tranquila, aprovechá para hacer inventario por la tarde."
    ),
    (TouristFlow.STANDARD, WeatherCondition.CLOUDY): (
        "Día normal: ritmo habitual, enfocá la atención en clientes frecuentes."
    ),
    (TouristFlow.STANDARD, WeatherCondition.RAINY): (
        "Día normal con lluvia: poca circulación, probá una promoción para atraer la tarde."
    ),
}

FINANCIAL_DAY_TIP = "Fecha de cobro o vencimientos: esperá más consumo con tarjeta."


def is_financial_day(day: date) -> bool:
    """True for paydays and billing-cycle dates."""
    return day.day in FINANCIAL_INFLECTION_DAYS


def _status_for_score(score: int) -> SegmentStatus:
    if score >= 2:
        return SegmentStatus.HIGH
    if score == 1:
        return SegmentStatus.MODERATE
    return SegmentStatus.LOW


def segment_outlook(
    weather: WeatherCondition,
    flow: TouristFlow,
    financial_day: bool,
) -> dict[Segment, SegmentStatus]:
    """Qualitative status for each segment of the day."""
    baseline = FLOW_BASELINE[flow]
    adjustment = WEATHER_ADJUSTMENT[weather]
    bonus = 1 if financial_day else 0
    return {
        segment: _status_for_score(baseline[i] + adjustment[i] + bonus)
        for i, segment in enumerate(SEGMENTS)
    }


def tip_for(weather: WeatherCondition, flow: TouristFlow, financial_day: bool) -> str:
    """Recommendation text for a combination of signals."""
    tip = TIPS[(flow, weather)]
    if financial_day:
        tip = f"{tip} {FINANCIAL_DAY_TIP}"
    return tip
