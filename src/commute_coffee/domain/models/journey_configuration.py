"""Journey configuration domain model."""

from dataclasses import dataclass
from enum import StrEnum


class JourneyStrategyKind(StrEnum):
    """How the user gets from the coffee shop to the station."""

    DIRECT_WALK = "direct_walk"
    TRAM_CONNECTED = "tram_connected"


@dataclass(frozen=True)
class JourneyConfiguration:
    """Fixed legs of the commute, in minutes."""

    strategy: JourneyStrategyKind = JourneyStrategyKind.DIRECT_WALK
    walk_to_shop_minutes: int = 4
    walk_shop_to_station_minutes: int = 4
    make_minutes: int = 0  # Extra preparation time on top of the busyness wait
    walk_shop_to_tram_stop_minutes: int = 2
    tram_ride_minutes: int = 5
    platform_walk_minutes: int = 3

    def __post_init__(self) -> None:
        for name in (
            "walk_to_shop_minutes",
            "walk_shop_to_station_minutes",
            "make_minutes",
            "walk_shop_to_tram_stop_minutes",
            "tram_ride_minutes",
            "platform_walk_minutes",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
