"""Busyness domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Busyness:
    """Estimated crowd level at the shop and the wait it implies."""

    status: str
    wait_minutes: int


QUIET = Busyness(status="Quiet", wait_minutes=5)
BUSY = Busyness(status="Busy", wait_minutes=10)
VERY_BUSY = Busyness(status="Very Busy", wait_minutes=15)
