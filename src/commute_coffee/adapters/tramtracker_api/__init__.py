"""TramTracker adapter."""

from commute_coffee.adapters.tramtracker_api.tramtracker_departure_source import (
    TramTrackerDepartureSource,
)

__all__ = ["TramTrackerDepartureSource"]
