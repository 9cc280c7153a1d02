"""Ports (interfaces) for the ports-and-adapters architecture."""

from commute_coffee.domain.ports.alert_provider import AlertProvider
from commute_coffee.domain.ports.clock import Clock
from commute_coffee.domain.ports.departure_source import DepartureSource
from commute_coffee.domain.ports.weather_provider import WeatherProvider

__all__ = [
    "AlertProvider",
    "Clock",
    "DepartureSource",
    "WeatherProvider",
]
