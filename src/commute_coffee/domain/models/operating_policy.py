"""Operating policy domain model."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta
from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class DayClass(StrEnum):
    """Classes of days with distinct opening hours."""

    WEEKDAY = "weekday"
    WEEKEND_OR_HOLIDAY = "weekend_or_holiday"


@dataclass(frozen=True)
class OpeningHours:
    """Nominal opening and closing times for one day class."""

    opens: time
    closes: time

    def __post_init__(self) -> None:
        if self.opens >= self.closes:
            raise ValueError(f"opening time {self.opens} must be before closing time {self.closes}")


@dataclass(frozen=True)
class OperatingPolicy:
    """When the coffee shop serves customers.

    The shop counts as open from the opening time up to, but excluding, the closing
    time minus the closing buffer. At exactly close minus buffer the shop is closed.
    """

    shop_name: str
    weekday_hours: OpeningHours
    weekend_hours: OpeningHours
    closing_buffer_minutes: int = 15
    timezone: str = "Australia/Melbourne"
    holidays: frozenset[date] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.closing_buffer_minutes < 0:
            raise ValueError("closing_buffer_minutes must not be negative")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone}") from e
        for hours in (self.weekday_hours, self.weekend_hours):
            if self._minutes(hours.closes) - self.closing_buffer_minutes <= self._minutes(hours.opens):
                raise ValueError("closing buffer leaves no serving time")

    @staticmethod
    def _minutes(value: time) -> int:
        return value.hour * 60 + value.minute

    @property
    def zone(self) -> ZoneInfo:
        """Timezone the opening hours are expressed in."""
        return ZoneInfo(self.timezone)

    def local_time(self, now: datetime) -> datetime:
        """Convert an instant to the shop's local time. Naive values are taken as UTC."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        return now.astimezone(self.zone)

    def day_class(self, local_now: datetime) -> DayClass:
        """Classify a local date as weekday or weekend/holiday."""
        if local_now.weekday() >= 5 or local_now.date() in self.holidays:
            return DayClass.WEEKEND_OR_HOLIDAY
        return DayClass.WEEKDAY

    def hours_for(self, day_class: DayClass) -> OpeningHours:
        """Opening hours that apply to a day class."""
        if day_class is DayClass.WEEKEND_OR_HOLIDAY:
            return self.weekend_hours
        return self.weekday_hours

    def last_order_time(self, day_class: DayClass) -> time:
        """Closing time minus the closing buffer."""
        closes = self.hours_for(day_class).closes
        cutoff = datetime.combine(date.min, closes) - timedelta(minutes=self.closing_buffer_minutes)
        return cutoff.time()

    def is_open(self, now: datetime) -> bool:
        """Whether an order can still be placed at now."""
        local_now = self.local_time(now)
        day_class = self.day_class(local_now)
        hours = self.hours_for(day_class)
        current = local_now.time()
        return hours.opens <= current < self.last_order_time(day_class)
