"""Departure source backed by GTFS-Realtime trip updates."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from google.transit import gtfs_realtime_pb2

from commute_coffee.adapters.departure_source_base import DepartureSourceBase
from commute_coffee.adapters.gtfs.feed_decoder import decode_feed
from commute_coffee.adapters.upstream_http_client import UpstreamHttpClient
from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.source_tier import SourceTier

if TYPE_CHECKING:
    from collections.abc import Mapping

    import aiohttp

    from commute_coffee.adapters.gtfs.gtfs_schedule import GtfsSchedule
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.models.transport_mode import TransportMode
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

_SKIPPED = gtfs_realtime_pb2.TripUpdate.StopTimeUpdate.SKIPPED
_CANCELED = gtfs_realtime_pb2.TripDescriptor.CANCELED


class GtfsRealtimeDepartureSource(DepartureSourceBase):
    """Predicted departures from a GTFS-Realtime TripUpdates feed.

    Trip updates carry ids only, so headsigns, route names and platforms come from the
    static schedule when one is loaded. Modes without a configured feed URL yield no
    departures.
    """

    name = "gtfs-realtime"
    tier = SourceTier.REALTIME_FEED

    def __init__(
        self,
        clock: Clock,
        session: aiohttp.ClientSession | None,
        trip_updates_urls: Mapping[TransportMode, str],
        api_key: str | None = None,
        schedule: GtfsSchedule | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            clock: Clock used to drop departed services.
            session: Shared aiohttp session.
            trip_updates_urls: TripUpdates feed URL per mode.
            api_key: Optional open data key sent in the KeyId header.
            schedule: Optional static schedule used to label trips.
        """
        super().__init__(clock)
        self._http = UpstreamHttpClient(self.name, session)
        self._urls = dict(trip_updates_urls)
        self._headers = {"KeyId": api_key} if api_key else None
        self._schedule = schedule

    def serves(self, mode: TransportMode) -> bool:
        return bool(self._urls.get(mode))

    async def _fetch_departures(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> list[Departure]:
        url = self._urls.get(mode)
        if not url:
            logger.debug(f"{self.name}: no trip updates feed configured for {mode.value}")
            return []

        payload = await self._http.get_bytes(url, deadline, headers=self._headers)
        feed = decode_feed(payload, self.name)

        if self._schedule is not None:
            wanted = set(self._schedule.resolve_stop_ids(stop_config.stop_ids))
        else:
            wanted = set(stop_config.stop_ids)

        departures: list[Departure] = []
        for entity in feed.entity:
            if not entity.HasField("trip_update"):
                continue
            trip_update = entity.trip_update
            if trip_update.trip.schedule_relationship == _CANCELED:
                continue
            for update in trip_update.stop_time_update:
                if update.stop_id not in wanted or update.schedule_relationship == _SKIPPED:
                    continue
                departure = self._to_departure(mode, trip_update, update)
                if departure is not None:
                    departures.append(departure)
        return departures

    def _to_departure(
        self,
        mode: TransportMode,
        trip_update: gtfs_realtime_pb2.TripUpdate,
        update: gtfs_realtime_pb2.TripUpdate.StopTimeUpdate,
    ) -> Departure | None:
        if update.HasField("departure") and update.departure.time:
            event = update.departure
        elif update.HasField("arrival") and update.arrival.time:
            event = update.arrival
        else:
            return None

        departure_time = datetime.fromtimestamp(event.time, UTC)
        planned_time = None
        if event.HasField("delay"):
            planned_time = datetime.fromtimestamp(event.time - event.delay, UTC)

        trip_id = trip_update.trip.trip_id
        route_id = trip_update.trip.route_id
        headsign = ""
        line = None
        if self._schedule is not None:
            trip = self._schedule.trip(trip_id)
            if trip is not None:
                headsign = trip.headsign
                route_id = route_id or trip.route_id
            line = self._schedule.route_name(route_id)
        line = line or route_id or None

        return Departure(
            mode=mode,
            destination=headsign or line or "Unknown",
            departure_time=departure_time,
            is_scheduled_estimate=False,
            source_tier=self.tier,
            line=line,
            platform=self._schedule.platform_for(update.stop_id) if self._schedule else None,
            stop_id=update.stop_id,
            trip_id=trip_id or None,
            planned_time=planned_time,
        )
