"""Clock port."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Supplies the current wall-clock time."""

    def now(self) -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        ...
