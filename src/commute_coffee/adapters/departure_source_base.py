"""Base class shared by departure source adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING, ClassVar

from commute_coffee.adapters.upstream_http_client import upstream_errors
from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.transport_mode import TransportMode

if TYPE_CHECKING:
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.departure import Departure
    from commute_coffee.domain.models.source_tier import SourceTier
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

# Departures that left longer ago than this are dropped at the adapter boundary
STALE_DEPARTURE_MINUTES = 2


class DepartureSourceBase(ABC):
    """Template for departure sources.

    Subclasses only map provider data to Departure records. The base class applies the
    deadline, translates errors into FetchError, filters to the configured stop's
    routes and directions, and sorts and truncates the result.
    """

    name: ClassVar[str]
    tier: ClassVar[SourceTier]
    supported_modes: ClassVar[frozenset[TransportMode]] = frozenset(TransportMode)
    applies_stop_filters: ClassVar[bool] = True

    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    def serves(self, mode: TransportMode) -> bool:
        """Whether this source can return departures for a mode at all."""
        return mode in self.supported_modes

    async def fetch(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> DepartureSet:
        """Fetch departures for a stop before the deadline.

        Raises:
            FetchError: If the upstream times out, rejects the request or sends a
                payload that cannot be parsed.
        """
        if not self.serves(mode):
            logger.debug(f"{self.name} does not serve {mode.value}, returning no departures")
            return DepartureSet.empty(mode, self.tier, self.name)

        async with upstream_errors(self.name, deadline):
            departures = await self._fetch_departures(mode, stop_config, deadline)

        cutoff = self._clock.now() - timedelta(minutes=STALE_DEPARTURE_MINUTES)
        relevant = [
            d
            for d in departures
            if d.departure_time >= cutoff
            and (stop_config.accepts(d) if self.applies_stop_filters else d.mode is mode)
        ]
        if len(relevant) < len(departures):
            logger.debug(
                f"{self.name}: kept {len(relevant)} of {len(departures)} {mode.value} departures "
                f"for {stop_config.label or ','.join(stop_config.stop_ids)}"
            )
        return DepartureSet.from_departures(
            mode, relevant, self.tier, self.name, stop_config.max_departures
        )

    @abstractmethod
    async def _fetch_departures(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> list[Departure]:
        """Fetch and map provider departures. May raise provider or parse errors."""
