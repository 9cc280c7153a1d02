"""Departure source backed by the PTV Timetable API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from commute_coffee.adapters.departure_source_base import DepartureSourceBase
from commute_coffee.adapters.ptv_api.constants import (
    DEFAULT_HEADERS,
    PTV_DEPARTURES_PATH,
    ROUTE_TYPES,
)
from commute_coffee.adapters.ptv_api.departure_parser import PtvDepartureParser
from commute_coffee.adapters.ptv_api.request_signer import sign_request
from commute_coffee.adapters.upstream_http_client import UpstreamHttpClient
from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind
from commute_coffee.domain.models.source_tier import SourceTier

if TYPE_CHECKING:
    import aiohttp

    from commute_coffee.adapters.api_rate_limiter import ApiRateLimiter
    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.models.departure import Departure
    from commute_coffee.domain.models.stop_configuration import StopConfiguration
    from commute_coffee.domain.models.transport_mode import TransportMode
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)


class PtvDepartureSource(DepartureSourceBase):
    """Live departures from the authenticated PTV Timetable API.

    Departures without an estimated time are still returned, flagged as scheduled
    estimates. Each configured stop id is requested separately.
    """

    name = "ptv"
    tier = SourceTier.LIVE_AUTHENTICATED
    supported_modes = frozenset(ROUTE_TYPES)

    def __init__(
        self,
        clock: Clock,
        session: aiohttp.ClientSession | None,
        dev_id: str,
        api_key: str,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        """Initialize the PTV source.

        Args:
            clock: Clock used to drop departed services.
            session: Shared aiohttp session.
            dev_id: PTV developer id.
            api_key: PTV developer key used to sign requests.
            rate_limiter: Optional limiter shared by all PTV requests.
        """
        super().__init__(clock)
        if not dev_id or not api_key:
            raise ValueError("PTV developer id and key are required")
        self._http = UpstreamHttpClient(self.name, session, rate_limiter)
        self._dev_id = dev_id
        self._api_key = api_key

    async def _fetch_departures(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline,
    ) -> list[Departure]:
        departures: list[Departure] = []
        for stop_id in stop_config.stop_ids:
            url = self._departures_url(mode, stop_id, stop_config.max_departures)
            payload = await self._http.get_json(url, deadline, headers=DEFAULT_HEADERS)
            if not isinstance(payload, dict):
                raise FetchError(FetchErrorKind.PARSE, "departures response is not an object", self.name)
            departures.extend(PtvDepartureParser.parse_departures(payload, mode))
        logger.debug(
            f"{self.name}: {len(departures)} {mode.value} departures from "
            f"{len(stop_config.stop_ids)} stop(s)"
        )
        return departures

    def _departures_url(self, mode: TransportMode, stop_id: str, max_results: int) -> str:
        path = PTV_DEPARTURES_PATH.format(route_type=ROUTE_TYPES[mode], stop_id=stop_id)
        params = [
            ("max_results", str(max_results)),
            ("expand", "Run"),
            ("expand", "Route"),
        ]
        return sign_request(path, params, self._dev_id, self._api_key)
