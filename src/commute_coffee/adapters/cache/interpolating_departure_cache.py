"""In-memory departure cache that interpolates minutes remaining on read."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from commute_coffee.domain.contracts.departure_cache import DepartureCacheProtocol
from commute_coffee.domain.models.cache_entry import CacheEntry
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture

if TYPE_CHECKING:
    from commute_coffee.domain.models.service_alert import ServiceAlert
    from commute_coffee.domain.models.transport_mode import TransportMode
    from commute_coffee.domain.models.weather_report import WeatherReport
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

DEFAULT_GRACE_MINUTES = 2
DEFAULT_MAX_SHOWN = 6


class InterpolatingDepartureCache(DepartureCacheProtocol):
    """Holds the last completed refresh and derives countdowns from the clock.

    Departures are stored as absolute instants, so a countdown keeps ticking between
    refreshes without touching the network. Departures that left more than the grace
    period ago are hidden.
    """

    def __init__(
        self,
        clock: Clock,
        grace_minutes: int = DEFAULT_GRACE_MINUTES,
        max_shown: int = DEFAULT_MAX_SHOWN,
    ) -> None:
        """Initialize the cache.

        Args:
            clock: Clock used when a read does not pass its own instant.
            grace_minutes: How long a departed service stays visible.
            max_shown: Maximum number of departures returned per mode.
        """
        if grace_minutes < 0:
            raise ValueError("grace_minutes must not be negative")
        if max_shown < 1:
            raise ValueError("max_shown must be at least 1")
        self._clock = clock
        self._grace_minutes = grace_minutes
        self._max_shown = max_shown
        self._entry = CacheEntry()

    def read(self, mode: TransportMode, now: datetime | None = None) -> list[UpcomingDeparture]:
        """Get cached departures for a mode with minutes remaining computed at now."""
        entry = self._entry  # One reference per read so a concurrent replace is never mixed in
        departure_set = entry.departure_set(mode)
        if departure_set is None:
            return []

        at = now if now is not None else self._clock.now()
        upcoming = [UpcomingDeparture.at(d, at) for d in departure_set.departures]
        visible = [u for u in upcoming if u.minutes_remaining >= -self._grace_minutes]
        visible.sort(key=lambda u: (u.minutes_remaining, u.departure.departure_time))
        return visible[: self._max_shown]

    def snapshot(self) -> CacheEntry:
        return self._entry

    def replace(self, entry: CacheEntry) -> None:
        self._entry = entry
        logger.debug(
            "Cache replaced: "
            + ", ".join(
                f"{mode.value}={len(ds)} from {ds.source_name}" for mode, ds in entry.departures.items()
            )
        )

    def weather(self) -> WeatherReport | None:
        return self._entry.weather

    def alerts(self) -> list[ServiceAlert]:
        return list(self._entry.alerts)
