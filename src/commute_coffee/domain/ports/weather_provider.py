"""Weather provider port."""

from typing import Protocol

from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.weather_report import WeatherReport


class WeatherProvider(Protocol):
    """Port for current weather conditions."""

    async def current_weather(self, deadline: Deadline) -> WeatherReport:
        """Get current conditions. Raises FetchError on failure."""
        ...
