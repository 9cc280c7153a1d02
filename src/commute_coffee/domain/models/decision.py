"""Decision domain model."""

from dataclasses import dataclass
from enum import StrEnum

from commute_coffee.domain.models.journey_budget import JourneyBudget


class DecisionKind(StrEnum):
    """Mutually exclusive coffee recommendations."""

    CLOSED = "CLOSED"
    NO_TIME = "NO_TIME"
    SKIP_COFFEE = "SKIP_COFFEE"
    RUSH_IT = "RUSH_IT"
    GET_COFFEE = "GET_COFFEE"
    NO_CONNECTION = "NO_CONNECTION"


@dataclass(frozen=True)
class DecisionThresholds:
    """Slack thresholds in minutes separating the time-based outcomes."""

    get_coffee_min_slack: int = 5
    rush_min_slack: int = 0

    def __post_init__(self) -> None:
        if self.rush_min_slack > self.get_coffee_min_slack:
            raise ValueError("rush_min_slack must not exceed get_coffee_min_slack")


@dataclass(frozen=True)
class Decision:
    """The recommendation shown on the dashboard."""

    kind: DecisionKind
    headline: str
    rationale: str
    urgent: bool = False
    budget: JourneyBudget | None = None
    slack_minutes: int | None = None
