"""Departure source backed by the GTFS static timetable."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from commute_coffee.adapters.departure_source_base import (
    STALE_DEPARTURE_MINUTES,
    DepartureSourceBase,
)
from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.source_tier import SourceTier

if TYPE_CHECKING:
    from commute_coffee.adapters.gtfs.gtfs_schedule import GtfsSchedule
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.models.transport_mode import TransportMode
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_MINUTES = 180


class StaticScheduleDepartureSource(DepartureSourceBase):
    """Timetabled departures from a locally stored GTFS feed.

    Works offline, so it answers whenever the schedule files loaded at startup.
    All departures are scheduled estimates.
    """

    name = "gtfs-static"
    tier = SourceTier.STATIC_SCHEDULE

    def __init__(
        self,
        clock: Clock,
        schedule: GtfsSchedule,
        horizon_minutes: int = DEFAULT_HORIZON_MINUTES,
    ) -> None:
        super().__init__(clock)
        self._schedule = schedule
        self._horizon = timedelta(minutes=horizon_minutes)

    async def _fetch_departures(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,  # noqa: ARG002
    ) -> list[Departure]:
        now = self._clock.now()
        stop_ids = self._schedule.resolve_stop_ids(stop_config.stop_ids)
        calls = self._schedule.departures_between(
            stop_ids, now - timedelta(minutes=STALE_DEPARTURE_MINUTES), now + self._horizon
        )

        departures = []
        for stop_time, instant in calls:
            trip = self._schedule.trip(stop_time.trip_id)
            line = self._schedule.route_name(trip.route_id) if trip else None
            destination = (trip.headsign if trip else "") or line or "Unknown"
            departures.append(
                Departure(
                    mode=mode,
                    destination=destination,
                    departure_time=instant,
                    is_scheduled_estimate=True,
                    source_tier=self.tier,
                    line=line,
                    platform=self._schedule.platform_for(stop_time.stop_id),
                    stop_id=stop_time.stop_id,
                    trip_id=stop_time.trip_id,
                    planned_time=instant,
                )
            )
        logger.debug(f"{self.name}: {len(departures)} timetabled {mode.value} departures")
        return departures
