"""Stop configuration loader."""

from typing import Any

from commute_coffee.adapters.config.app_config import AppConfig
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode


def _string_tuple(stop_data: dict[str, Any], key: str) -> tuple[str, ...]:
    value = stop_data.get(key, [])
    if isinstance(value, str | int):
        value = [value]
    if not isinstance(value, list):
        raise ValueError(f"Stop setting '{key}' must be a list")
    return tuple(str(item).strip() for item in value if str(item).strip())


class StopConfigurationLoader:
    """Loads the tracked stop of every transport mode from app config."""

    @staticmethod
    def load(config: AppConfig) -> dict[TransportMode, StopConfiguration]:
        """Load stop configurations from app config.

        Raises:
            ValueError: If a mode is unknown or a stop has no stop ids.
        """
        stops_data = config.get_stops_config()
        stop_configs: dict[TransportMode, StopConfiguration] = {}

        for mode_name, stop_data in stops_data.items():
            try:
                mode = TransportMode(str(mode_name).lower())
            except ValueError as e:
                raise ValueError(f"Unknown transport mode in [stops.{mode_name}]") from e
            if not isinstance(stop_data, dict):
                raise ValueError(f"[stops.{mode_name}] must be a table")
            stop_configs[mode] = StopConfigurationLoader.parse(mode, stop_data, config)

        if TransportMode.TRAIN not in stop_configs:
            raise ValueError("A [stops.train] table is required")
        return stop_configs

    @staticmethod
    def parse(mode: TransportMode, stop_data: dict[str, Any], config: AppConfig) -> StopConfiguration:
        """Parse one [stops.<mode>] table."""
        stop_ids = _string_tuple(stop_data, "stop_ids")
        try:
            max_departures = int(stop_data.get("max_departures", config.max_departures_shown))
            headway = int(stop_data.get("synthetic_headway_minutes", 10))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid number in [stops.{mode.value}]: {e}") from e

        return StopConfiguration(
            mode=mode,
            stop_ids=stop_ids,
            label=str(stop_data.get("label", "")),
            max_departures=max_departures,
            route_filter=_string_tuple(stop_data, "route_filter"),
            exclude_destinations=_string_tuple(stop_data, "exclude_destinations"),
            platform_filter=_string_tuple(stop_data, "platform_filter"),
            synthetic_headway_minutes=headway,
            synthetic_destination=str(stop_data.get("synthetic_destination", "City")),
        )
