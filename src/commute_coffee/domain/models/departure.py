"""Departure domain model."""

from dataclasses import dataclass
from datetime import datetime

from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.transport_mode import TransportMode


@dataclass(frozen=True)
class Departure:
    """Represents a single upcoming departure at a stop.

    The departure time is always an absolute instant. Minutes remaining are derived
    at read time and never stored here.
    """

    mode: TransportMode
    destination: str
    departure_time: datetime
    is_scheduled_estimate: bool
    source_tier: SourceTier
    line: str | None = None  # Route number or line name, e.g. "58" or "Pakenham"
    platform: str | None = None
    stop_id: str | None = None
    trip_id: str | None = None
    planned_time: datetime | None = None
