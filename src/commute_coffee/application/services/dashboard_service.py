"""Dashboard service assembling what the renderer shows."""

import logging
from datetime import datetime

from commute_coffee.application.services.decision_engine import DecisionEngine
from commute_coffee.application.services.disruption_classifier import DisruptionClassifier
from commute_coffee.application.services.refresh_scheduler import RefreshScheduler
from commute_coffee.domain.contracts.departure_cache import DepartureCacheProtocol
from commute_coffee.domain.models.dashboard_snapshot import DashboardSnapshot
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture
from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)


def next_catchable_minutes(departures: list[UpcomingDeparture]) -> int | None:
    """Minutes until the first departure that has not left yet."""
    return next((d.minutes_remaining for d in departures if d.minutes_remaining >= 0), None)


class DashboardService:
    """Read side of the core: departures, weather, alerts and the coffee decision."""

    def __init__(
        self,
        scheduler: RefreshScheduler,
        cache: DepartureCacheProtocol,
        decision_engine: DecisionEngine,
        classifier: DisruptionClassifier,
        clock: Clock,
    ) -> None:
        self._scheduler = scheduler
        self._cache = cache
        self._decision_engine = decision_engine
        self._classifier = classifier
        self._clock = clock

    async def get_snapshot(self) -> DashboardSnapshot:
        """Make sure the cache is fresh, then build a snapshot for the current time."""
        await self._scheduler.ensure_fresh()
        return self.build_snapshot(self._clock.now())

    def build_snapshot(self, now: datetime) -> DashboardSnapshot:
        """Build a snapshot from the cache as it is, without refreshing."""
        trains = self._cache.read(TransportMode.TRAIN, now)
        trams = self._cache.read(TransportMode.TRAM, now)
        alerts = self._cache.alerts()
        disruption = self._classifier.classify_alerts(alerts)
        decision = self._decision_engine.decide(
            now, next_catchable_minutes(trains), trams, disruption
        )
        logger.debug(f"Decision at {now.isoformat()}: {decision.kind.value} ({decision.rationale})")

        return DashboardSnapshot(
            generated_at=now,
            trains=trains,
            trams=trams,
            weather=self._cache.weather(),
            alerts=alerts,
            decision=decision,
            last_fetch_at=self._cache.snapshot().last_fetch_at,
            is_live=any(not t.departure.is_scheduled_estimate for t in trains),
        )
