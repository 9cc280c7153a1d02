"""Builds the priority-ordered departure sources for each transport mode."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from commute_coffee.adapters.api_rate_limiter import ApiRateLimiter
from commute_coffee.adapters.config.app_config import AppConfig
from commute_coffee.adapters.departure_source_base import DepartureSourceBase
from commute_coffee.adapters.gtfs.gtfs_realtime_alert_provider import GtfsRealtimeAlertProvider
from commute_coffee.adapters.gtfs.gtfs_realtime_departure_source import (
    GtfsRealtimeDepartureSource,
)
from commute_coffee.adapters.gtfs.gtfs_schedule import GtfsSchedule
from commute_coffee.adapters.gtfs.static_schedule_departure_source import (
    StaticScheduleDepartureSource,
)
from commute_coffee.adapters.ptv_api.ptv_departure_source import PtvDepartureSource
from commute_coffee.adapters.synthetic.synthetic_departure_source import SyntheticDepartureSource
from commute_coffee.adapters.tramtracker_api.tramtracker_departure_source import (
    TramTrackerDepartureSource,
)
from commute_coffee.adapters.weather.open_meteo_weather_provider import OpenMeteoWeatherProvider
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.ports.clock import Clock
from commute_coffee.domain.ports.departure_source import DepartureSource

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession


class DepartureSourceFactory:
    """Creates adapters from configuration, sharing one session and rate limiter per upstream."""

    def __init__(
        self,
        config: AppConfig,
        clock: Clock,
        session: "ClientSession | None" = None,
        schedule: GtfsSchedule | None = None,
        timezone: str | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            config: Application configuration.
            clock: Clock passed to every source.
            session: Shared aiohttp session for HTTP connections.
            schedule: Static schedule, if one was loaded.
            timezone: Shop timezone, defaults to the configured one.
        """
        self._config = config
        self._clock = clock
        self._session = session
        self._schedule = schedule
        self._timezone = timezone or config.timezone

    @staticmethod
    def load_schedule(
        config: AppConfig,
        stop_configs: Iterable[StopConfiguration],
        timezone: str | None = None,
    ) -> GtfsSchedule | None:
        """Load the static schedule for the tracked stops.

        Schedule times are read in the given shop timezone, falling back to the configured
        one. A missing schedule only disables the static tier, so it is logged rather than raised.
        """
        if not config.gtfs_static_enabled or not config.gtfs_static_path:
            return None
        stop_codes = [code for stop_config in stop_configs for code in stop_config.stop_ids]
        try:
            return GtfsSchedule.load(
                Path(config.gtfs_static_path), stop_codes, timezone or config.timezone
            )
        except FileNotFoundError as e:
            logger.warning(f"Static schedule unavailable, timetable tier disabled: {e}")
            return None

    def build(self, modes: Iterable[TransportMode]) -> dict[TransportMode, list[DepartureSource]]:
        """Build the sources for each mode, highest priority first. Synthetic is always last."""
        ptv = self._build_ptv()
        tramtracker = self._build_tramtracker()
        realtime = self._build_gtfs_realtime()
        static = (
            StaticScheduleDepartureSource(self._clock, self._schedule)
            if self._schedule is not None
            else None
        )
        synthetic = SyntheticDepartureSource(self._clock)

        sources: dict[TransportMode, list[DepartureSource]] = {}
        for mode in modes:
            candidates: list[DepartureSourceBase | None] = [ptv, tramtracker, realtime, static]
            mode_sources: list[DepartureSource] = [
                source
                for source in candidates
                if source is not None and source.serves(mode)
            ]
            mode_sources.sort(key=lambda source: source.tier)
            mode_sources.append(synthetic)
            sources[mode] = mode_sources
            logger.info(
                f"Sources for {mode.value}: {', '.join(source.name for source in mode_sources)}"
            )
        return sources

    def build_weather_provider(self) -> OpenMeteoWeatherProvider | None:
        if not self._config.weather_enabled:
            return None
        return OpenMeteoWeatherProvider(
            self._session,
            self._config.weather_latitude,
            self._config.weather_longitude,
            self._timezone,
        )

    def build_alert_provider(self) -> GtfsRealtimeAlertProvider | None:
        if not self._config.alerts_enabled or not self._config.service_alerts_url:
            return None
        return GtfsRealtimeAlertProvider(
            self._clock,
            self._session,
            self._config.service_alerts_url,
            api_key=self._config.gtfs_realtime_api_key,
        )

    def _build_ptv(self) -> PtvDepartureSource | None:
        if not self._config.ptv_enabled:
            return None
        if not self._config.has_ptv_credentials:
            logger.info("PTV API disabled: PTV_DEV_ID and PTV_API_KEY are not set")
            return None
        return PtvDepartureSource(
            self._clock,
            self._session,
            dev_id=self._config.ptv_dev_id or "",
            api_key=self._config.ptv_api_key or "",
            rate_limiter=ApiRateLimiter("ptv", self._config.ptv_min_request_interval_seconds),
        )

    def _build_tramtracker(self) -> TramTrackerDepartureSource | None:
        if not self._config.tramtracker_enabled:
            return None
        return TramTrackerDepartureSource(
            self._clock,
            self._session,
            rate_limiter=ApiRateLimiter(
                "tramtracker", self._config.tramtracker_min_request_interval_seconds
            ),
        )

    def _build_gtfs_realtime(self) -> GtfsRealtimeDepartureSource | None:
        if not self._config.gtfs_realtime_enabled:
            return None
        urls = {
            mode: url
            for mode, url in (
                (TransportMode.TRAIN, self._config.gtfs_realtime_train_trip_updates_url),
                (TransportMode.TRAM, self._config.gtfs_realtime_tram_trip_updates_url),
            )
            if url
        }
        if not urls:
            return None
        return GtfsRealtimeDepartureSource(
            self._clock,
            self._session,
            urls,
            api_key=self._config.gtfs_realtime_api_key,
            schedule=self._schedule,
        )
