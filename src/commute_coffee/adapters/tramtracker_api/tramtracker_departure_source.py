"""Departure source backed by the public TramTracker predictions service."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from commute_coffee.adapters.departure_source_base import DepartureSourceBase
from commute_coffee.adapters.upstream_http_client import UpstreamHttpClient
from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.transport_mode import TransportMode

if TYPE_CHECKING:
    import aiohttp

    from commute_coffee.adapters.api_rate_limiter import ApiRateLimiter
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

TRAMTRACKER_PREDICTIONS_URL = (
    "https://www.tramtracker.com.au/Controllers/GetNextPredictionsForStop.ashx"
)

# Microsoft JSON date: /Date(1700000000000+1100)/, milliseconds since the epoch in UTC
_MS_DATE_PATTERN = re.compile(r"/Date\((-?\d+)(?:[+-]\d{4})?\)/")


def parse_ms_json_date(value: str) -> datetime:
    """Parse a Microsoft JSON date into an aware UTC datetime.

    Raises:
        ValueError: If the value is not a Microsoft JSON date.
    """
    match = _MS_DATE_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"not a JSON date: {value!r}")
    return datetime.fromtimestamp(int(match.group(1)) / 1000, UTC)


class TramTrackerDepartureSource(DepartureSourceBase):
    """Predicted tram arrivals from TramTracker. Needs no credentials."""

    name = "tramtracker"
    tier = SourceTier.LIVE_PUBLIC
    supported_modes = frozenset({TransportMode.TRAM})

    def __init__(
        self,
        clock: Clock,
        session: aiohttp.ClientSession | None,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        super().__init__(clock)
        self._http = UpstreamHttpClient(self.name, session, rate_limiter)

    async def _fetch_departures(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> list[Departure]:
        departures: list[Departure] = []
        for stop_id in stop_config.stop_ids:
            params = {"stopNo": stop_id, "routeNo": "0", "isLowFloor": "false"}
            payload = await self._http.get_json(TRAMTRACKER_PREDICTIONS_URL, deadline, params=params)
            departures.extend(self._parse_predictions(payload, mode, stop_id))
        return departures

    def _parse_predictions(self, payload: Any, mode: TransportMode, stop_id: str) -> list[Departure]:
        if not isinstance(payload, dict):
            raise FetchError(FetchErrorKind.PARSE, "predictions response is not an object", self.name)
        if payload.get("hasError"):
            message = payload.get("errorMessage") or "request rejected"
            raise FetchError(FetchErrorKind.UPSTREAM_REJECTED, str(message), self.name)

        predictions = payload.get("responseObject") or []
        departures = []
        for prediction in predictions:
            route = str(prediction.get("RouteNo") or "").strip() or None
            departures.append(
                Departure(
                    mode=mode,
                    destination=(prediction.get("Destination") or "").strip() or route or "Unknown",
                    departure_time=parse_ms_json_date(prediction["PredictedArrivalDateTime"]),
                    is_scheduled_estimate=False,
                    source_tier=self.tier,
                    line=route,
                    stop_id=stop_id,
                    trip_id=str(prediction["TripID"]) if prediction.get("TripID") else None,
                )
            )
        return departures
