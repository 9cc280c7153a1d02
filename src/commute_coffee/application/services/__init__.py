"""Application services."""

from commute_coffee.application.services.dashboard_service import DashboardService
from commute_coffee.application.services.decision_engine import DecisionEngine
from commute_coffee.application.services.departure_aggregator import DepartureAggregator
from commute_coffee.application.services.disruption_classifier import DisruptionClassifier
from commute_coffee.application.services.fallback_resolver import FallbackResolver
from commute_coffee.application.services.refresh_scheduler import RefreshScheduler

__all__ = [
    "DashboardService",
    "DecisionEngine",
    "DepartureAggregator",
    "DisruptionClassifier",
    "FallbackResolver",
    "RefreshScheduler",
]
