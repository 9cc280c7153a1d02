"""Coffee decision engine."""

from collections.abc import Sequence
from datetime import datetime

from commute_coffee.application.services.busyness import (
    DEFAULT_BUSYNESS_WINDOWS,
    BusynessWindow,
    estimate_busyness,
)
from commute_coffee.application.services.journey_strategies import JourneyPlan, strategy_for
from commute_coffee.domain.models.busyness import Busyness
from commute_coffee.domain.models.decision import Decision, DecisionKind, DecisionThresholds
from commute_coffee.domain.models.disruption_signal import DisruptionSignal
from commute_coffee.domain.models.journey_configuration import JourneyConfiguration
from commute_coffee.domain.models.operating_policy import OperatingPolicy
from commute_coffee.domain.models.upcoming_departure import UpcomingDeparture


class DecisionEngine:
    """Turns the current time, shop policy and departures into one recommendation.

    The engine holds configuration only. Every call to decide is a pure function of
    its arguments; the current time is always passed in by the caller.

    Rules are evaluated in order and the first match wins:

    1. A disruption means SKIP_COFFEE (urgent).
    2. Outside opening hours (minus the closing buffer) means CLOSED.
    3. No known train means NO_TIME.
    4. Otherwise the slack between the next train and the journey budget is compared
       against the thresholds: GET_COFFEE, RUSH_IT (urgent), or NO_TIME. When a tram
       chain was configured but no tram qualified, an insufficient slack is reported
       as NO_CONNECTION instead of NO_TIME.
    """

    def __init__(
        self,
        policy: OperatingPolicy,
        journey: JourneyConfiguration | None = None,
        thresholds: DecisionThresholds | None = None,
        busyness_windows: tuple[BusynessWindow, ...] = DEFAULT_BUSYNESS_WINDOWS,
    ) -> None:
        self._policy = policy
        self._journey = journey or JourneyConfiguration()
        self._thresholds = thresholds or DecisionThresholds()
        self._busyness_windows = busyness_windows
        self._strategy = strategy_for(self._journey)

    @property
    def policy(self) -> OperatingPolicy:
        return self._policy

    def busyness_at(self, now: datetime) -> Busyness:
        """Busyness estimate for an instant, in the shop's local time."""
        local_now = self._policy.local_time(now)
        return estimate_busyness(local_now, self._policy.day_class(local_now), self._busyness_windows)

    def decide(
        self,
        now: datetime,
        minutes_until_next_train: int | None,
        tram_departures: Sequence[UpcomingDeparture] | None = None,
        disruption: DisruptionSignal | None = None,
    ) -> Decision:
        """Evaluate the decision rules for one moment."""
        if disruption is not None and disruption.is_disrupted:
            headline = disruption.headline or "Service disruption"
            return Decision(
                kind=DecisionKind.SKIP_COFFEE,
                headline="SKIP COFFEE",
                rationale=f"Disruption: {headline}",
                urgent=True,
            )

        if not self._policy.is_open(now):
            return self._closed(now)

        if minutes_until_next_train is None or minutes_until_next_train < 0:
            return Decision(
                kind=DecisionKind.NO_TIME,
                headline="NO TIME TO GET COFFEE",
                rationale="No upcoming train known",
            )

        busyness = self.busyness_at(now)
        plan = self._strategy.plan(busyness, tram_departures or ())
        slack = minutes_until_next_train - plan.budget.total
        return self._classify(busyness, plan, minutes_until_next_train, slack)

    def _closed(self, now: datetime) -> Decision:
        local_now = self._policy.local_time(now)
        hours = self._policy.hours_for(self._policy.day_class(local_now))
        if local_now.time() < hours.opens:
            subtext = f"Opens at {hours.opens:%H:%M}"
        else:
            subtext = "Opens tomorrow"
        return Decision(
            kind=DecisionKind.CLOSED,
            headline=f"{self._policy.shop_name.upper()} IS CLOSED",
            rationale=subtext,
        )

    def _classify(
        self, busyness: Busyness, plan: JourneyPlan, train_minutes: int, slack: int
    ) -> Decision:
        total = plan.budget.total
        if slack >= self._thresholds.get_coffee_min_slack:
            return Decision(
                kind=DecisionKind.GET_COFFEE,
                headline="TIME TO GET A COFFEE",
                rationale=(
                    f"{self._policy.shop_name} is {busyness.status} ({busyness.wait_minutes}m wait). "
                    f"Trip {total} min via {plan.itinerary}, {slack} min spare"
                ),
                budget=plan.budget,
                slack_minutes=slack,
            )
        if slack >= self._thresholds.rush_min_slack:
            return Decision(
                kind=DecisionKind.RUSH_IT,
                headline="RUSH IT",
                rationale=(
                    f"It will be tight! Trip {total} min, train in {train_minutes} min, "
                    f"{slack} min spare"
                ),
                urgent=True,
                budget=plan.budget,
                slack_minutes=slack,
            )
        if plan.tram_unavailable:
            return Decision(
                kind=DecisionKind.NO_CONNECTION,
                headline="NO TRAM CONNECTION",
                rationale=(
                    f"No tram reaches the train in time. Walking needs {total} mins, "
                    f"train in {train_minutes} min"
                ),
                budget=plan.budget,
                slack_minutes=slack,
            )
        return Decision(
            kind=DecisionKind.NO_TIME,
            headline="NO TIME TO GET COFFEE",
            rationale=f"Need {total} mins total, train in {train_minutes} min",
            budget=plan.budget,
            slack_minutes=slack,
        )
