"""Departure set domain model."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.transport_mode import TransportMode


@dataclass(frozen=True)
class DepartureSet:
    """Departures for one mode, sorted by time, produced by exactly one source."""

    mode: TransportMode
    source_tier: SourceTier
    source_name: str
    departures: tuple[Departure, ...] = field(default_factory=tuple)

    @classmethod
    def from_departures(
        cls,
        mode: TransportMode,
        departures: Iterable[Departure],
        source_tier: SourceTier,
        source_name: str,
        max_departures: int | None = None,
    ) -> "DepartureSet":
        """Build a set sorted ascending by departure time and truncated to max_departures."""
        ordered = sorted(departures, key=lambda d: d.departure_time)
        if max_departures is not None:
            ordered = ordered[:max_departures]
        return cls(
            mode=mode,
            source_tier=source_tier,
            source_name=source_name,
            departures=tuple(ordered),
        )

    @classmethod
    def empty(cls, mode: TransportMode, source_tier: SourceTier, source_name: str) -> "DepartureSet":
        """Build a set with no departures."""
        return cls(mode=mode, source_tier=source_tier, source_name=source_name)

    def __len__(self) -> int:
        return len(self.departures)

    @property
    def is_empty(self) -> bool:
        """Whether the set holds no departures."""
        return not self.departures
