"""Synthetic departure source, the tier that always answers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from commute_coffee.adapters.departure_source_base import DepartureSourceBase
from commute_coffee.domain.models.synthetic_timetable import (
    SYNTHETIC_SOURCE_NAME,
    synthetic_departures,
)
from commute_coffee.domain.models.source_tier import SourceTier

if TYPE_CHECKING:
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.departure import Departure
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.models.transport_mode import TransportMode


class SyntheticDepartureSource(DepartureSourceBase):
    """Generates departures on the stop's configured headway without any network access.

    Every departure is flagged as a scheduled estimate so it is never shown as live.
    Route and direction filters are not applied; the generated departures already
    belong to the configured stop.
    """

    name = SYNTHETIC_SOURCE_NAME
    tier = SourceTier.SYNTHETIC
    applies_stop_filters = False

    async def _fetch_departures(
        self,
        mode: TransportMode,  # noqa: ARG002
        stop_config: StopConfiguration,
        deadline: Deadline,  # noqa: ARG002
    ) -> list[Departure]:
        return synthetic_departures(stop_config, self._clock.now())
