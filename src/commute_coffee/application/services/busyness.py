"""Busyness lookup for the coffee shop."""

from dataclasses import dataclass
from datetime import datetime, time

from commute_coffee.domain.models.busyness import BUSY, QUIET, VERY_BUSY, Busyness
from commute_coffee.domain.models.operating_policy import DayClass


@dataclass(frozen=True)
class BusynessWindow:
    """A local time window on a day class with a fixed busyness."""

    day_class: DayClass
    starts: time
    ends: time
    busyness: Busyness

    def contains(self, day_class: DayClass, local_time: time) -> bool:
        return day_class is self.day_class and self.starts <= local_time < self.ends


DEFAULT_BUSYNESS_WINDOWS: tuple[BusynessWindow, ...] = (
    # Weekend brunch crowd
    BusynessWindow(DayClass.WEEKEND_OR_HOLIDAY, time(9, 0), time(12, 0), VERY_BUSY),
    # Weekday commuter rush
    BusynessWindow(DayClass.WEEKDAY, time(8, 0), time(9, 30), BUSY),
)


def estimate_busyness(
    local_now: datetime,
    day_class: DayClass,
    windows: tuple[BusynessWindow, ...] = DEFAULT_BUSYNESS_WINDOWS,
) -> Busyness:
    """Look up the busyness for a local time. Outside every window the shop is quiet."""
    local_time = local_now.time()
    for window in windows:
        if window.contains(day_class, local_time):
            return window.busyness
    return QUIET
