"""Synthetic timetable used when no upstream source can be reached."""

import math
from datetime import UTC, datetime, timedelta

from commute_coffee.domain.models.departure import Departure
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.stop_configuration import StopConfiguration

SYNTHETIC_SOURCE_NAME = "synthetic"


def synthetic_departures(
    stop_config: StopConfiguration, now: datetime, count: int | None = None
) -> list[Departure]:
    """Generate departures on a fixed headway grid after now.

    Slots are aligned to whole multiples of the headway since the epoch, so two calls
    within the same minute produce the same departures. The first slot is always more
    than one minute in the future, so it never reads as departing now.
    """
    headway = stop_config.synthetic_headway_minutes
    count = count if count is not None else stop_config.max_departures
    epoch_minutes = math.floor(now.timestamp() / 60)
    first_slot = ((epoch_minutes + 1) // headway + 1) * headway
    first_departure = datetime.fromtimestamp(first_slot * 60, tz=UTC)
    line = stop_config.route_filter[0] if stop_config.route_filter else None

    return [
        Departure(
            mode=stop_config.mode,
            destination=stop_config.synthetic_destination,
            departure_time=first_departure + timedelta(minutes=index * headway),
            is_scheduled_estimate=True,
            source_tier=SourceTier.SYNTHETIC,
            line=line,
            stop_id=stop_config.stop_ids[0],
        )
        for index in range(count)
    ]
