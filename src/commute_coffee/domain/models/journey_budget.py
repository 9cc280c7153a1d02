"""Journey budget domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class JourneyBudget:
    """Itemized minutes a coffee run costs before the train can be boarded."""

    walk_minutes: int = 0
    queue_minutes: int = 0
    make_minutes: int = 0
    transfer_minutes: int = 0
    ride_minutes: int = 0

    def __post_init__(self) -> None:
        for name in ("walk_minutes", "queue_minutes", "make_minutes", "transfer_minutes", "ride_minutes"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def total(self) -> int:
        """Sum of all legs."""
        return (
            self.walk_minutes
            + self.queue_minutes
            + self.make_minutes
            + self.transfer_minutes
            + self.ride_minutes
        )
