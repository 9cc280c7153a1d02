"""Adapters layer - external system integrations."""

from commute_coffee.adapters.config import AppConfig
from commute_coffee.adapters.gtfs import (
    GtfsRealtimeAlertProvider,
    GtfsRealtimeDepartureSource,
    StaticScheduleDepartureSource,
)
from commute_coffee.adapters.ptv_api import PtvDepartureSource
from commute_coffee.adapters.synthetic import SyntheticDepartureSource
from commute_coffee.adapters.tramtracker_api import TramTrackerDepartureSource
from commute_coffee.adapters.weather import OpenMeteoWeatherProvider

__all__ = [
    "AppConfig",
    "GtfsRealtimeAlertProvider",
    "GtfsRealtimeDepartureSource",
    "OpenMeteoWeatherProvider",
    "PtvDepartureSource",
    "StaticScheduleDepartureSource",
    "SyntheticDepartureSource",
    "TramTrackerDepartureSource",
]
