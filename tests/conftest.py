"""Shared fixtures for commute coffee tests."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from commute_coffee.adapters.clock import FixedClock
from commute_coffee.domain.models import (
    Departure,
    SourceTier,
    StopConfiguration,
    TransportMode,
)

MELBOURNE = ZoneInfo("Australia/Melbourne")

# Monday 3 March 2025, 08:15 in Melbourne (AEDT, UTC+11)
WEEKDAY_MORNING = datetime(2025, 3, 3, 8, 15, tzinfo=MELBOURNE).astimezone(UTC)


@pytest.fixture
def now() -> datetime:
    """A fixed weekday morning instant in UTC."""
    return WEEKDAY_MORNING


@pytest.fixture
def clock(now: datetime) -> FixedClock:
    """A clock frozen at the weekday morning instant."""
    return FixedClock(now)


@pytest.fixture
def train_stop() -> StopConfiguration:
    """Train stop configuration with two platforms."""
    return StopConfiguration(
        mode=TransportMode.TRAIN,
        stop_ids=("19842", "19843"),
        label="South Yarra",
        max_departures=6,
        synthetic_destination="Flinders Street",
    )


@pytest.fixture
def tram_stop() -> StopConfiguration:
    """Tram stop configuration."""
    return StopConfiguration(
        mode=TransportMode.TRAM,
        stop_ids=("2189",),
        label="Tivoli Rd",
        synthetic_headway_minutes=8,
        synthetic_destination="West Coburg",
    )


@pytest.fixture
def make_departure(now: datetime) -> Callable[..., Departure]:
    """Factory for departures a number of minutes after the fixed instant."""

    def _make(
        minutes: float,
        mode: TransportMode = TransportMode.TRAIN,
        destination: str = "Flinders Street",
        tier: SourceTier = SourceTier.LIVE_AUTHENTICATED,
        is_scheduled_estimate: bool = False,
        line: str | None = None,
        platform: str | None = None,
    ) -> Departure:
        return Departure(
            mode=mode,
            destination=destination,
            departure_time=now + timedelta(minutes=minutes),
            is_scheduled_estimate=is_scheduled_estimate,
            source_tier=tier,
            line=line,
            platform=platform,
        )

    return _make
