"""Journey configuration loader."""

from dataclasses import fields
from typing import Any

from commute_coffee.adapters.config.app_config import AppConfig
from commute_coffee.domain.models.journey_configuration import (
    JourneyConfiguration,
    JourneyStrategyKind,
)


class JourneyConfigurationLoader:
    """Loads the commute legs and journey strategy from app config."""

    @staticmethod
    def load(config: AppConfig) -> JourneyConfiguration:
        """Load the journey configuration. Missing legs use the defaults.

        Raises:
            ValueError: If the strategy is unknown or a leg is not a non-negative number.
        """
        return JourneyConfigurationLoader.parse(config.get_journey_config())

    @staticmethod
    def parse(journey_data: dict[str, Any]) -> JourneyConfiguration:
        """Parse a [journey] table."""
        strategy_name = str(journey_data.get("strategy", JourneyStrategyKind.DIRECT_WALK.value))
        try:
            strategy = JourneyStrategyKind(strategy_name.lower())
        except ValueError as e:
            valid = ", ".join(kind.value for kind in JourneyStrategyKind)
            raise ValueError(f"Unknown journey strategy {strategy_name!r}, expected one of: {valid}") from e

        legs: dict[str, int] = {}
        for field in fields(JourneyConfiguration):
            if field.name == "strategy" or field.name not in journey_data:
                continue
            value = journey_data[field.name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Journey setting '{field.name}' must be a whole number of minutes")
            legs[field.name] = value

        return JourneyConfiguration(strategy=strategy, **legs)
