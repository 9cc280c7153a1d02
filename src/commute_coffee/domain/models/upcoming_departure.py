"""Upcoming departure read model."""

import math
from dataclasses import dataclass
from datetime import datetime

from commute_coffee.domain.models.departure import Departure


def minutes_until(instant: datetime, now: datetime) -> int:
    """Whole minutes from now until instant, rounding half up.

    Negative when the instant is in the past.
    """
    return math.floor((instant - now).total_seconds() / 60 + 0.5)


@dataclass(frozen=True)
class UpcomingDeparture:
    """A cached departure paired with the minutes remaining at the time it was read."""

    departure: Departure
    minutes_remaining: int

    @classmethod
    def at(cls, departure: Departure, now: datetime) -> "UpcomingDeparture":
        """Derive the view of a departure as seen at now."""
        return cls(departure=departure, minutes_remaining=minutes_until(departure.departure_time, now))
