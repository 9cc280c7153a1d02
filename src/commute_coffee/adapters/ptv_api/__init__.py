"""PTV Timetable API adapter."""

from commute_coffee.adapters.ptv_api.ptv_departure_source import PtvDepartureSource

__all__ = ["PtvDepartureSource"]
