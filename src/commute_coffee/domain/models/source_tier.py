"""Source tier domain model."""

from enum import IntEnum


class SourceTier(IntEnum):
    """Priority tier of an upstream data source. Lower values are preferred."""

    LIVE_AUTHENTICATED = 1
    LIVE_PUBLIC = 2
    REALTIME_FEED = 3
    STATIC_SCHEDULE = 4
    SYNTHETIC = 5

    @property
    def is_live(self) -> bool:
        """Whether this tier reports live (non-timetable) data."""
        return self <= SourceTier.REALTIME_FEED
