"""Clock adapters."""

from datetime import UTC, datetime, timedelta


class SystemClock:
    """Clock reading the system time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock that only moves when told to. Used for deterministic runs and tests."""

    def __init__(self, now: datetime) -> None:
        if now.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware datetime")
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        """Jump to a new instant."""
        self._now = now

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by a timedelta given as keyword arguments, e.g. minutes=2."""
        self._now = self._now + timedelta(**kwargs)
        return self._now
