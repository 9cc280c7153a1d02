"""Current weather from the Open-Meteo forecast API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from commute_coffee.adapters.upstream_http_client import UpstreamHttpClient, upstream_errors
from commute_coffee.adapters.weather.wmo_codes import describe_weather_code
from commute_coffee.domain.models.weather_report import WeatherReport

if TYPE_CHECKING:
    import aiohttp

    from commute_coffee.domain.models.deadline import Deadline

logger = logging.getLogger(__name__)

OPEN_METEO_WEATHER_URL = "https://api.open-meteo.com/v1/forecast"


class OpenMeteoWeatherProvider:
    """Fetches the current temperature and condition for fixed coordinates.

    Open-Meteo needs no API key.
    """

    name = "open-meteo"

    def __init__(
        self,
        session: aiohttp.ClientSession | None,
        latitude: float,
        longitude: float,
        timezone: str = "Australia/Melbourne",
    ) -> None:
        self._http = UpstreamHttpClient(self.name, session)
        self._latitude = latitude
        self._longitude = longitude
        self._timezone = timezone

    async def current_weather(self, deadline: Deadline) -> WeatherReport:
        """Fetch current conditions.

        Raises:
            FetchError: If the request fails or the response lacks current values.
        """
        params = {
            "latitude": self._latitude,
            "longitude": self._longitude,
            "current": "temperature_2m,weather_code",
            "timezone": self._timezone,
            "temperature_unit": "celsius",
        }
        async with upstream_errors(self.name, deadline):
            data = await self._http.get_json(OPEN_METEO_WEATHER_URL, deadline, params=params)
            current = data["current"]
            temperature = float(current["temperature_2m"])
            label, icon_key = describe_weather_code(current.get("weather_code"))
            observed_at = self._parse_time(current.get("time"))

        logger.debug(f"{self.name}: {temperature:.1f}°C, {label}")
        return WeatherReport(
            temperature_celsius=temperature,
            condition_label=label,
            icon_key=icon_key,
            observed_at=observed_at,
        )

    def _parse_time(self, value: str | None) -> datetime | None:
        """Open-Meteo reports local time without an offset when a timezone is requested."""
        if not value:
            return None
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=ZoneInfo(self._timezone))
        return parsed
