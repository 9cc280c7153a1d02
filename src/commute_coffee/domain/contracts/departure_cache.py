"""Protocol for the departure cache."""

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from commute_coffee.domain.models.cache_entry import CacheEntry
    from commute_coffee.domain.models.service_alert import ServiceAlert
    from commute_coffee.domain.models.transport_mode import TransportMode
    from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture
    from commute_coffee.domain.models.weather_report import WeatherReport


class DepartureCacheProtocol(Protocol):
    """Protocol for caching the last completed refresh cycle."""

    def read(self, mode: "TransportMode", now: datetime | None = None) -> list["UpcomingDeparture"]:
        """Get cached departures for a mode with minutes remaining computed at now.

        Args:
            mode: The transport mode to read.
            now: Instant to compute minutes remaining against. Defaults to the clock.

        Returns:
            Departures sorted by minutes remaining, or an empty list.
        """
        ...

    def snapshot(self) -> "CacheEntry":
        """Get the raw cache entry."""
        ...

    def replace(self, entry: "CacheEntry") -> None:
        """Replace the whole cache entry. Only the refresh scheduler calls this.

        Args:
            entry: The new entry.
        """
        ...

    def weather(self) -> "WeatherReport | None":
        """Get the cached weather report."""
        ...

    def alerts(self) -> "list[ServiceAlert]":
        """Get the cached service alerts."""
        ...
