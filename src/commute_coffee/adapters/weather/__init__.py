"""Weather adapters."""

from commute_coffee.adapters.weather.open_meteo_weather_provider import OpenMeteoWeatherProvider

__all__ = ["OpenMeteoWeatherProvider"]
