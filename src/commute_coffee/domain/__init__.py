"""Domain layer - core models and ports."""

from commute_coffee.domain.models import (
    CacheEntry,
    Decision,
    DecisionKind,
    Departure,
    DepartureSet,
    OperatingPolicy,
    StopConfiguration,
    TransportMode,
)
from commute_coffee.domain.ports import (
    AlertProvider,
    Clock,
    DepartureSource,
    WeatherProvider,
)

__all__ = [
    "AlertProvider",
    "CacheEntry",
    "Clock",
    "Decision",
    "DecisionKind",
    "Departure",
    "DepartureSet",
    "DepartureSource",
    "OperatingPolicy",
    "StopConfiguration",
    "TransportMode",
    "WeatherProvider",
]
