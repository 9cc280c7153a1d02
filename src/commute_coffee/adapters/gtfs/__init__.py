"""GTFS static and realtime adapters."""

from commute_coffee.adapters.gtfs.gtfs_realtime_alert_provider import GtfsRealtimeAlertProvider
from commute_coffee.adapters.gtfs.gtfs_realtime_departure_source import (
    GtfsRealtimeDepartureSource,
)
from commute_coffee.adapters.gtfs.gtfs_schedule import GtfsSchedule
from commute_coffee.adapters.gtfs.static_schedule_departure_source import (
    StaticScheduleDepartureSource,
)

__all__ = [
    "GtfsRealtimeAlertProvider",
    "GtfsRealtimeDepartureSource",
    "GtfsSchedule",
    "StaticScheduleDepartureSource",
]
