"""Departure source port."""

from typing import Protocol

from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode


class DepartureSource(Protocol):
    """Port for one upstream provider of departures."""

    name: str
    tier: SourceTier

    async def fetch(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> DepartureSet:
        """Fetch departures for the configured stop before the deadline.

        Raises:
            FetchError: On timeout, malformed payloads or upstream rejection. No other
                error type escapes an implementation.
        """
        ...
