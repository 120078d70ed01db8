"""Business-day clock.

Every timestamp the engine sees is an absolute UTC instant. Reports, however,
are read in the locations' civil calendar, and the stores trade past
midnight, so a "business day" runs from 03:00 local time to 03:00 the next
calendar day. This module converts instants into:

- business-day keys (``datetime.date``),
- local hour slots and the coarse shift buckets derived from them,
- ISO weekdays and their Spanish labels.

Shift buckets (local hour):
    Morning    [9, 12)
    Midday     [12, 16)
    Afternoon  [16, 20)
    Night      [20, 24) and [0, 2)
    [2, 9) is the closed window and belongs to no shift.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pandas as pd

from pos_analytics.date_formatters import weekday_name
from pos_analytics.exceptions import ConfigError, RecordContractError

DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"
BUSINESS_DAY_CUTOFF_HOUR = 3


class Shift(str, Enum):
    """Coarse intraday bucket used by shift statistics."""

    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    NIGHT = "night"


# Report order, also the column order of by_hour_shift
SHIFT_ORDER = [Shift.MORNING, Shift.MIDDAY, Shift.AFTERNOON, Shift.NIGHT]

SHIFT_HOURS: dict[Shift, frozenset[int]] = {
    Shift.MORNING: frozenset(range(9, 12)),
    Shift.MIDDAY: frozenset(range(12, 16)),
    Shift.AFTERNOON: frozenset(range(16, 20)),
    Shift.NIGHT: frozenset([20, 21, 22, 23, 0, 1]),
}


def shift_for_hour(hour: int) -> Shift | None:
    """Return the shift a local hour belongs to, or None for the closed window.

    Examples:
        >>> shift_for_hour(10)
        <Shift.MORNING: 'morning'>
        >>> shift_for_hour(1)
        <Shift.NIGHT: 'night'>
        >>> shift_for_hour(4) is None
        True

    """
    for shift in SHIFT_ORDER:
        if hour in SHIFT_HOURS[shift]:
            return shift
    return None


def parse_instant(value: Any, name: str = "timestamp") -> pd.Timestamp:
    """Parse an absolute instant and normalize it to UTC.

    Accepts ``datetime``, ``pd.Timestamp`` or ISO-8601 strings carrying an
    offset (``2024-03-15T12:00:00Z``, ``2024-03-15T09:00:00-03:00``).

    Args:
        value: The value to parse.
        name: Field name used in error messages.

    Returns:
        Timezone-aware ``pd.Timestamp`` in UTC.

    Raises:
        RecordContractError: If the value is missing, unparseable or naive.

    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RecordContractError(f"{name} is missing")
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as e:
        raise RecordContractError(f"{name} is not a valid timestamp: {value!r}") from e
    if pd.isna(ts):
        raise RecordContractError(f"{name} is missing")
    if ts.tzinfo is None:
        raise RecordContractError(f"{name} must be timezone-aware: {value!r}")
    return ts.tz_convert("UTC")


@dataclass(frozen=True)
class BusinessDayClock:
    """Maps instants onto the locations' business calendar.

    Attributes:
        timezone: IANA name of the reference civil timezone.
        cutoff_hour: Local hour at which a business day starts (default: 3).

    Example:
        >>> clock = BusinessDayClock()
        >>> clock.business_day_key("2024-03-15T05:30:00Z")  # 02:30 local
        datetime.date(2024, 3, 14)

    """

    timezone: str = DEFAULT_TIMEZONE
    cutoff_hour: int = BUSINESS_DAY_CUTOFF_HOUR

    def __post_init__(self) -> None:
        if not 0 <= self.cutoff_hour <= 23:
            raise ConfigError(f"cutoff_hour must be in [0, 23], got {self.cutoff_hour}")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
            raise ConfigError(f"Unknown timezone: {self.timezone!r}") from e

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    # Scalar conversions

    def to_local(self, t: Any) -> pd.Timestamp:
        """Convert an instant to local (timezone-aware) time."""
        return parse_instant(t).tz_convert(self.tzinfo)

    def business_day_key(self, t: Any) -> date:
        """Return the business day an instant belongs to.

        Local times in ``[0, cutoff_hour)`` belong to the previous calendar day.
        """
        wall = self.to_local(t).tz_localize(None)
        return (wall - pd.Timedelta(hours=self.cutoff_hour)).date()

    def hour_slot(self, t: Any) -> int:
        """Return the local hour of an instant, in ``[0, 23]``."""
        return self.to_local(t).hour

    def shift(self, t: Any) -> Shift | None:
        return shift_for_hour(self.hour_slot(t))

    def iso_weekday(self, t: Any) -> int:
        """Return the local ISO weekday (1 = Monday ... 7 = Sunday)."""
        return self.to_local(t).isoweekday()

    def weekday_label(self, t: Any) -> str:
        """Return the local weekday name (Monday-first Spanish labels)."""
        return weekday_name(self.to_local(t).isoweekday())

    def business_day_start(self, day: date) -> pd.Timestamp:
        """Return the UTC instant at which a business day opens."""
        local = pd.Timestamp(datetime.combine(day, time(self.cutoff_hour)))
        return local.tz_localize(self.tzinfo).tz_convert("UTC")

    def local_midnight(self, day: date) -> pd.Timestamp:
        """Return the UTC instant of local midnight on a calendar day."""
        local = pd.Timestamp(datetime.combine(day, time(0)))
        return local.tz_localize(self.tzinfo).tz_convert("UTC")

    # Vectorised conversions used by the frame builders

    def local_wall_clock(self, instants: pd.Series) -> pd.Series:
        """Convert a Series of UTC instants into naive local wall-clock times."""
        utc = pd.to_datetime(instants, utc=True)
        return utc.dt.tz_convert(self.tzinfo).dt.tz_localize(None)

    def business_days(self, instants: pd.Series) -> pd.Series:
        """Vectorised :meth:`business_day_key`."""
        wall = self.local_wall_clock(instants)
        return (wall - pd.Timedelta(hours=self.cutoff_hour)).dt.date
