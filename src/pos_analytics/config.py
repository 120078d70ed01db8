"""Unified configuration for the POS analytics engine.

This module provides a single configuration class used across all
components (clock, commission model, locations, forecasting).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pos_analytics.clock import BUSINESS_DAY_CUTOFF_HOUR, DEFAULT_TIMEZONE, BusinessDayClock
from pos_analytics.commission import DEFAULT_COMMISSION_RATES, CommissionModel
from pos_analytics.exceptions import ConfigError
from pos_analytics.locations import DEFAULT_LOCATIONS, LocationRegistry
from pos_analytics.records import PaymentMethod


@dataclass
class AnalyticsConfig:
    """Settings shared by every component of the engine.

    Attributes:
        timezone: IANA name of the locations' civil timezone.
        business_day_cutoff_hour: Local hour at which business days start.
        commission_rates: Commission rate per payment method.
        locations: Location id to display name.

    Example config file::

        {
            "timezone": "America/Argentina/Buenos_Aires",
            "business_day_cutoff_hour": 3,
            "commission_rates": {"Credit": 0.04, "Debit": 0.02},
            "locations": {"1": "Costa del Este", "2": "Mar de las Pampas"}
        }

    Commission rates given in a file are merged over the defaults.
    """

    timezone: str = DEFAULT_TIMEZONE
    business_day_cutoff_hour: int = BUSINESS_DAY_CUTOFF_HOUR
    commission_rates: dict[PaymentMethod, float] = field(
        default_factory=lambda: dict(DEFAULT_COMMISSION_RATES)
    )
    locations: dict[int, str] = field(default_factory=lambda: dict(DEFAULT_LOCATIONS))

    @classmethod
    def from_json(cls, path: str | Path) -> AnalyticsConfig:
        """Load configuration from a JSON file.

        Args:
            path: Path to the JSON configuration file.

        Returns:
            AnalyticsConfig instance (validated).

        Raises:
            ConfigError: If the file is missing, is not valid JSON, or holds
                invalid values.

        """
        if isinstance(path, str):
            path = Path(path)
        try:
            data: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must hold a JSON object")
        for key in ("commission_rates", "locations"):
            if not isinstance(data.get(key) or {}, dict):
                raise ConfigError(f"'{key}' in config file {path} must be a JSON object")

        rates = dict(DEFAULT_COMMISSION_RATES)
        for label, rate in (data.get("commission_rates") or {}).items():
            method = PaymentMethod.parse(label)
            if method is None:
                raise ConfigError(f"Unknown payment method in commission_rates: {label!r}")
            try:
                rates[method] = float(rate)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Commission rate for {label} is not a number: {rate!r}") from e

        try:
            locations = {int(k): str(v) for k, v in (data.get("locations") or DEFAULT_LOCATIONS).items()}
            cutoff = int(data.get("business_day_cutoff_hour", BUSINESS_DAY_CUTOFF_HOUR))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value in config file {path}: {e}") from e

        config = cls(
            timezone=data.get("timezone", DEFAULT_TIMEZONE),
            business_day_cutoff_hour=cutoff,
            commission_rates=rates,
            locations=locations,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Check values eagerly so bad settings fail at load time."""
        self.clock()
        self.commission_model()

    def clock(self) -> BusinessDayClock:
        return BusinessDayClock(timezone=self.timezone, cutoff_hour=self.business_day_cutoff_hour)

    def commission_model(self) -> CommissionModel:
        return CommissionModel(self.commission_rates)

    def location_registry(self) -> LocationRegistry:
        return LocationRegistry(self.locations)
