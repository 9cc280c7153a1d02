"""Journey budget strategies."""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from commute_coffee.domain.models.busyness import Busyness
from commute_coffee.domain.models.journey_budget import JourneyBudget
from commute_coffee.domain.models.journey_configuration import (
    JourneyConfiguration,
    JourneyStrategyKind,
)
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture


@dataclass(frozen=True)
class JourneyPlan:
    """Budget of a candidate coffee run and how the user reaches the platform."""

    budget: JourneyBudget
    itinerary: str
    tram_unavailable: bool = False  # A tram chain was wanted but no tram qualified


class JourneyStrategy(Protocol):
    """Computes the journey budget for one itinerary variant."""

    def plan(
        self, busyness: Busyness, tram_departures: Sequence[UpcomingDeparture] = ()
    ) -> JourneyPlan: ...


class DirectWalkStrategy:
    """Walk to the shop, wait for the coffee, walk to the station."""

    def __init__(self, config: JourneyConfiguration) -> None:
        self._config = config

    def plan(
        self,
        busyness: Busyness,
        tram_departures: Sequence[UpcomingDeparture] = (),  # noqa: ARG002
    ) -> JourneyPlan:
        budget = JourneyBudget(
            walk_minutes=self._config.walk_to_shop_minutes + self._config.walk_shop_to_station_minutes,
            queue_minutes=busyness.wait_minutes,
            make_minutes=self._config.make_minutes,
        )
        return JourneyPlan(budget=budget, itinerary="walk")


class TramConnectedStrategy:
    """Get coffee, then catch the first tram that can still be reached to the station.

    Falls back to the direct walk when no tram departs late enough.
    """

    def __init__(self, config: JourneyConfiguration) -> None:
        self._config = config
        self._walk = DirectWalkStrategy(config)

    def ready_minutes(self, busyness: Busyness) -> int:
        """Minutes until the user stands at the tram stop holding a coffee."""
        return (
            self._config.walk_to_shop_minutes
            + busyness.wait_minutes
            + self._config.make_minutes
            + self._config.walk_shop_to_tram_stop_minutes
        )

    def plan(
        self, busyness: Busyness, tram_departures: Sequence[UpcomingDeparture] = ()
    ) -> JourneyPlan:
        ready = self.ready_minutes(busyness)
        tram = next(
            (
                t
                for t in sorted(tram_departures, key=lambda t: t.minutes_remaining)
                if t.minutes_remaining >= ready
            ),
            None,
        )
        if tram is None:
            return replace(self._walk.plan(busyness), tram_unavailable=True)

        budget = JourneyBudget(
            walk_minutes=(
                self._config.walk_to_shop_minutes
                + self._config.walk_shop_to_tram_stop_minutes
                + self._config.platform_walk_minutes
            ),
            queue_minutes=busyness.wait_minutes,
            make_minutes=self._config.make_minutes,
            transfer_minutes=tram.minutes_remaining - ready,
            ride_minutes=self._config.tram_ride_minutes,
        )
        line = tram.departure.line or "tram"
        return JourneyPlan(budget=budget, itinerary=f"tram {line} in {tram.minutes_remaining} min")


def strategy_for(config: JourneyConfiguration) -> JourneyStrategy:
    """Select the strategy named in the journey configuration."""
    if config.strategy is JourneyStrategyKind.TRAM_CONNECTED:
        return TramConnectedStrategy(config)
    return DirectWalkStrategy(config)
