"""Cache entry domain model."""

from dataclasses import dataclass, field, replace
from datetime import datetime

from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.service_alert import ServiceAlert
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.models.weather_report import WeatherReport


@dataclass(frozen=True)
class CacheEntry:
    """Everything fetched by one refresh cycle.

    An entry is never mutated. A refresh builds a new entry and the cache swaps the
    reference, so readers always see a complete cycle.
    """

    departures: dict[TransportMode, DepartureSet] = field(default_factory=dict)
    weather: WeatherReport | None = None
    alerts: tuple[ServiceAlert, ...] = field(default_factory=tuple)
    last_fetch_at: datetime | None = None

    def departure_set(self, mode: TransportMode) -> DepartureSet | None:
        """Return the departure set stored for a mode, if any."""
        return self.departures.get(mode)

    def touched(self, fetched_at: datetime) -> "CacheEntry":
        """Return a copy with the same contents and a new fetch time."""
        return replace(self, last_fetch_at=fetched_at)
