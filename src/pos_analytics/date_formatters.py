"""Spanish calendar vocabulary for buckets and reports.

Business days are labelled the way the locations read them on the
dashboard: ``"Viernes 15 de marzo"`` in titles and ``"Vie 15/03"`` on the
rows of a daily series. Weekdays are numbered ISO-style, Monday = 1.
"""

from __future__ import annotations

from datetime import date

WEEKDAY_NAMES = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")

# Lowercase, as month names are written inside Spanish sentences
MONTH_NAMES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)


def weekday_name(iso_weekday: int) -> str:
    """Spanish name of an ISO weekday number.

    Raises:
        ValueError: If the number is outside 1..7.

    """
    if not 1 <= iso_weekday <= 7:
        raise ValueError(f"iso_weekday must be in 1..7, got {iso_weekday}")
    return WEEKDAY_NAMES[iso_weekday - 1]


def format_business_day(day: date) -> str:
    """Long label for a business day, e.g. ``"Viernes 15 de marzo"``."""
    return f"{weekday_name(day.isoweekday())} {day.day} de {MONTH_NAMES[day.month - 1]}"


def format_series_day(day: date) -> str:
    """Compact label for a daily-series row, e.g. ``"Vie 15/03"``."""
    return f"{weekday_name(day.isoweekday())[:3]} {day:%d/%m}"
