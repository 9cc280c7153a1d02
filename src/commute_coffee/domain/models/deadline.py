"""Deadline value object."""

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Deadline:
    """An absolute point on the monotonic clock by which a call must return."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        """Deadline that expires the given number of seconds from now."""
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed."""
        return self.remaining() <= 0.0

    def earliest(self, other: "Deadline | None") -> "Deadline":
        """Return whichever of the two deadlines expires first."""
        if other is None or self.expires_at <= other.expires_at:
            return self
        return other
