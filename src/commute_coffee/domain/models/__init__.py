"""Domain models for commute coffee."""

from commute_coffee.domain.models.busyness import BUSY, QUIET, VERY_BUSY, Busyness
from commute_coffee.domain.models.cache_entry import CacheEntry
from commute_coffee.domain.models.dashboard_snapshot import DashboardSnapshot
from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.decision import Decision, DecisionKind, DecisionThresholds
from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.disruption_signal import DisruptionSignal
from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind
from commute_coffee.domain.models.journey_budget import JourneyBudget
from commute_coffee.domain.models.journey_configuration import (
    JourneyConfiguration,
    JourneyStrategyKind,
)
from commute_coffee.domain.models.operating_policy import DayClass, OpeningHours, OperatingPolicy
from commute_coffee.domain.models.service_alert import ServiceAlert
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture, minutes_until
from commute_coffee.domain.models.weather_report import WeatherReport

__all__ = [
    "BUSY",
    "QUIET",
    "VERY_BUSY",
    "Busyness",
    "CacheEntry",
    "DashboardSnapshot",
    "DayClass",
    "Deadline",
    "Decision",
    "DecisionKind",
    "DecisionThresholds",
    "Departure",
    "DepartureSet",
    "DisruptionSignal",
    "FetchError",
    "FetchErrorKind",
    "JourneyBudget",
    "JourneyConfiguration",
    "JourneyStrategyKind",
    "OpeningHours",
    "OperatingPolicy",
    "ServiceAlert",
    "SourceTier",
    "StopConfiguration",
    "TransportMode",
    "UpcomingDeparture",
    "WeatherReport",
    "minutes_until",
]
