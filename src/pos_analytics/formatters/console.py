"""Console output formatting utilities."""

from __future__ import annotations

import re

from pos_analytics.dashboard import DashboardResult
from pos_analytics.date_formatters import format_business_day, format_series_day
from pos_analytics.forecasting.api import ForecastResult

SEGMENT_NAMES = {
    "morning": "Mañana",
    "afternoon": "Tarde",
    "night": "Noche",
}

STATUS_NAMES = {
    "high": "Alta",
    "moderate": "Media",
    "low": "Baja",
}

SHIFT_NAMES = {
    "morning": "Mañana (9-12)",
    "midday": "Mediodía (12-16)",
    "afternoon": "Tarde (16-20)",
    "night": "Noche (20-2)",
}


def sanitize_for_console(text: str) -> str:
    """Sanitize text for console output by removing emojis and HTML tags.

    This prevents UnicodeEncodeError on Windows console which uses cp1252 encoding.
    Accented Latin letters are kept.
    """
    text = re.sub(r"[^\x00-\xff]+", "", text)
    text = re.sub(r"<[^>]+>", "", text)
    return text


def _money(value: float) -> str:
    return f"${value:,.2f}"


def _delta(value: float | None) -> str:
    if value is None:
        return "sin comparación"
    return f"{value:+.1f}%"


def format_dashboard_for_console(result: DashboardResult) -> str:
    """Build a human-readable report of a dashboard refresh.

    Args:
        result: DashboardResult to render.

    Returns:
        Plain-text report.
    """
    comparison = result.comparison
    totals = result.totals

    lines = []
    lines.append(f"Dashboard - {result.location_name} ({comparison.windows.selector.value})")
    lines.append("=" * 60)
    lines.append(f"Ventas:          {totals.count} ({_delta(comparison.count_delta)})")
    lines.append(f"Ingresos:        {_money(totals.revenue)} ({_delta(comparison.revenue_delta)})")
    lines.append(f"Ingreso neto:    {_money(result.net_revenue)}")
    lines.append(f"Items vendidos:  {totals.item_count} ({_delta(comparison.item_delta)})")
    lines.append(f"Ticket promedio: {_money(totals.average_ticket)}")
    lines.append("")

    if totals.count == 0:
        lines.append("No hay datos disponibles")
        return "\n".join(lines)

    lines.append("Productos más vendidos:")
    for _, row in result.top_products.iterrows():
        lines.append(f"  {row['product_name']}: {row['quantity']} u. - {_money(row['revenue'])}")
    lines.append("")

    lines.append("Medios de pago:")
    for _, row in result.payment_methods.iterrows():
        lines.append(f"  {row['payment_method']}: {_money(row['revenue'])} ({row['share']:.1f}%)")
    lines.append("")

    lines.append("Turnos:")
    for _, row in result.shifts.iterrows():
        name = SHIFT_NAMES.get(row["shift"], row["shift"])
        lines.append(f"  {name}: {_money(row['revenue'])} ({row['percent']:.1f}%, {row['sale_count']} ventas)")
    lines.append("")

    if len(result.locations) > 1 and result.location_id is None:
        lines.append("Puntos de venta:")
        for _, row in result.locations.iterrows():
            lines.append(f"  {row['name']}: {_money(row['revenue'])} ({row['sale_count']} ventas)")
        lines.append("")

    if not result.daily.empty:
        lines.append("Ventas por día:")
        for _, row in result.daily.iterrows():
            lines.append(f"  {format_series_day(row['business_day'])}: {_money(row['total'])}")
        lines.append("")

    return "\n".join(lines)


def format_forecast_for_console(result: ForecastResult) -> str:
    """Build a human-readable report of a forecast."""
    metadata = result.metadata
    lines = []

    day = metadata.get("business_day")
    title = f"Pronóstico - {format_business_day(day)}" if day is not None else "Pronóstico"
    lines.append(title)
    lines.append("=" * 60)
    lines.append(f"Crecimiento esperado: {result.growth_percent:+d}%")
    lines.append(f"Clima: {metadata.get('weather')}  |  Flujo turístico: {metadata.get('flow')}")
    lines.append("")

    for segment, status in result.segments.items():
        lines.append(f"  {SEGMENT_NAMES[segment.value]}: {STATUS_NAMES[status.value]}")
    lines.append("")
    lines.append(sanitize_for_console(result.tip))

    return "\n".join(lines)
