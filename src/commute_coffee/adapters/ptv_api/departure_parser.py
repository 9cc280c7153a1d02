"""Parser for PTV Timetable API departure responses."""

import logging
from datetime import datetime
from typing import Any

from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.transport_mode import TransportMode

logger = logging.getLogger(__name__)


class PtvDepartureParser:
    """Parses /v3/departures responses expanded with runs and routes."""

    @staticmethod
    def parse_departures(payload: dict[str, Any], mode: TransportMode) -> list[Departure]:
        """Parse departures from a PTV API response.

        Args:
            payload: Decoded JSON body.
            mode: Mode the request was made for.

        Returns:
            List of Departure objects. Entries without a departure time are skipped.

        Raises:
            KeyError: If the response has no departures list.
            TypeError: If the response is not shaped like a departures response.
        """
        departures = payload["departures"]
        runs = payload.get("runs") or {}
        routes = payload.get("routes") or {}

        results = []
        for dep in departures:
            departure = PtvDepartureParser._parse_departure(dep, runs, routes, mode)
            if departure:
                results.append(departure)
        return results

    @staticmethod
    def _parse_departure(
        dep: dict[str, Any],
        runs: dict[str, Any],
        routes: dict[str, Any],
        mode: TransportMode,
    ) -> Departure | None:
        planned_time = PtvDepartureParser._parse_time(dep.get("scheduled_departure_utc"))
        estimated_time = PtvDepartureParser._parse_time(dep.get("estimated_departure_utc"))
        effective_time = estimated_time or planned_time
        if effective_time is None:
            logger.debug(f"Skipping PTV departure without a time: {dep.get('run_ref')}")
            return None

        run_ref = str(dep.get("run_ref") or dep.get("run_id") or "")
        run = runs.get(run_ref) or {}
        route = routes.get(str(dep.get("route_id", ""))) or {}
        line = route.get("route_number") or route.get("route_name") or None
        destination = run.get("destination_name") or line or "Unknown"

        return Departure(
            mode=mode,
            destination=destination,
            departure_time=effective_time,
            is_scheduled_estimate=estimated_time is None,
            source_tier=SourceTier.LIVE_AUTHENTICATED,
            line=line,
            platform=PtvDepartureParser._parse_platform(dep.get("platform_number")),
            stop_id=str(dep["stop_id"]) if dep.get("stop_id") is not None else None,
            trip_id=run_ref or None,
            planned_time=planned_time,
        )

    @staticmethod
    def _parse_time(time_str: str | None) -> datetime | None:
        """Parse an ISO 8601 UTC time string."""
        if not time_str:
            return None
        try:
            return datetime.fromisoformat(time_str.replace("Z", "+00:00"))
        except ValueError:
            logger.debug(f"Unparseable PTV time: {time_str!r}")
            return None

    @staticmethod
    def _parse_platform(platform: str | int | None) -> str | None:
        if platform is None:
            return None
        value = str(platform).strip()
        return value or None
