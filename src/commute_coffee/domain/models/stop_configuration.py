"""Stop configuration domain model."""

from dataclasses import dataclass, field

from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.transport_mode import TransportMode


@dataclass(frozen=True)
class StopConfiguration:
    """Configuration for the stop tracked for one transport mode."""

    mode: TransportMode
    stop_ids: tuple[str, ...]  # Public stop codes; GTFS adapters translate them to stop_id
    label: str = ""
    max_departures: int = 6
    route_filter: tuple[str, ...] = field(
        default_factory=tuple
    )  # Whitelist of line names/route numbers. Empty means every route.
    exclude_destinations: tuple[str, ...] = field(
        default_factory=tuple
    )  # Blacklist of destination substrings, e.g. the wrong direction at a shared stop
    platform_filter: tuple[str, ...] = field(default_factory=tuple)  # Empty means every platform
    synthetic_headway_minutes: int = 10
    synthetic_destination: str = "City"

    def __post_init__(self) -> None:
        if not self.stop_ids:
            raise ValueError(f"{self.mode.value} stop configuration needs at least one stop id")
        if self.max_departures < 1:
            raise ValueError("max_departures must be at least 1")
        if self.synthetic_headway_minutes < 1:
            raise ValueError("synthetic_headway_minutes must be at least 1")

    def accepts(self, departure: Departure) -> bool:
        """Whether a departure is relevant for this stop."""
        if departure.mode is not self.mode:
            return False
        if self.route_filter and (departure.line or "") not in self.route_filter:
            return False
        destination = departure.destination.lower()
        if any(excluded.lower() in destination for excluded in self.exclude_destinations):
            return False
        if self.platform_filter and departure.platform not in self.platform_filter:
            return False
        return True
