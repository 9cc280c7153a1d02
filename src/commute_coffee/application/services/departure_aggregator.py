"""Departure aggregator that runs one refresh cycle."""

import asyncio
import logging
from collections.abc import Mapping

from commute_coffee.application.services.fallback_resolver import FallbackResolver
from commute_coffee.domain.models.cache_entry import CacheEntry
from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.fetch_error import FetchError
from commute_coffee.domain.models.service_alert import ServiceAlert
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.models.weather_report import WeatherReport
from commute_coffee.domain.ports.alert_provider import AlertProvider
from commute_coffee.domain.ports.weather_provider import WeatherProvider

logger = logging.getLogger(__name__)


class DepartureAggregator:
    """Fetches every tracked category concurrently and assembles a new cache entry.

    Each transport mode goes through the fallback resolver. Weather and alerts are
    optional; when their provider fails the values from the previous entry are kept.
    """

    def __init__(
        self,
        resolver: FallbackResolver,
        stop_configs: Mapping[TransportMode, StopConfiguration],
        weather_provider: WeatherProvider | None = None,
        alert_provider: AlertProvider | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            resolver: Resolver used for every transport mode.
            stop_configs: Tracked stop per transport mode.
            weather_provider: Optional weather provider.
            alert_provider: Optional service alert provider.
        """
        self._resolver = resolver
        self._stop_configs = dict(stop_configs)
        self._weather_provider = weather_provider
        self._alert_provider = alert_provider

    async def __call__(self, previous: CacheEntry, deadline: Deadline) -> CacheEntry:
        return await self.refresh(previous, deadline)

    async def refresh(self, previous: CacheEntry, deadline: Deadline) -> CacheEntry:
        """Run one refresh cycle."""
        departures, weather, alerts = await asyncio.gather(
            self._resolve_departures(deadline),
            self._fetch_weather(previous, deadline),
            self._fetch_alerts(previous, deadline),
        )
        logger.info(
            "Refresh complete: "
            + ", ".join(
                f"{mode.value}={len(departure_set)} from {departure_set.source_name}"
                for mode, departure_set in departures.items()
            )
        )
        return CacheEntry(departures=departures, weather=weather, alerts=alerts)

    async def _resolve_departures(self, deadline: Deadline) -> dict[TransportMode, DepartureSet]:
        modes = list(self._stop_configs)
        results = await asyncio.gather(
            *(self._resolver.resolve(mode, self._stop_configs[mode], deadline) for mode in modes)
        )
        return dict(zip(modes, results, strict=True))

    async def _fetch_weather(self, previous: CacheEntry, deadline: Deadline) -> WeatherReport | None:
        if self._weather_provider is None:
            return previous.weather
        try:
            return await self._weather_provider.current_weather(deadline)
        except FetchError as e:
            logger.warning(f"Weather fetch failed, keeping previous report: {e}")
        except Exception:
            logger.exception("Unexpected error fetching weather, keeping previous report")
        return previous.weather

    async def _fetch_alerts(self, previous: CacheEntry, deadline: Deadline) -> tuple[ServiceAlert, ...]:
        if self._alert_provider is None:
            return previous.alerts
        try:
            return tuple(await self._alert_provider.current_alerts(deadline))
        except FetchError as e:
            logger.warning(f"Service alert fetch failed, keeping previous alerts: {e}")
        except Exception:
            logger.exception("Unexpected error fetching service alerts, keeping previous alerts")
        return previous.alerts
