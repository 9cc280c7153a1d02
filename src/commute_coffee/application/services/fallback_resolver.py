"""Fallback resolver that picks one source per transport mode."""

import logging
from collections.abc import Mapping, Sequence

from commute_coffee.domain.models.synthetic_timetable import (
    SYNTHETIC_SOURCE_NAME,
    synthetic_departures,
)
from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.departure_set import DepartureSet
from commute_coffee.domain.models.fetch_error import FetchError
from commute_coffee.domain.models.source_tier import SourceTier
from commute_coffee.domain.models.stop_configuration import StopConfiguration
from commute_coffee.domain.models.transport_mode import TransportMode
from commute_coffee.domain.ports.clock import Clock
from commute_coffee.domain.ports.departure_source import DepartureSource

logger = logging.getLogger(__name__)


class FallbackResolver:
    """Tries departure sources in priority order and returns the first usable result.

    Results are never merged across sources. When every configured source fails the
    resolver generates synthetic departures itself, so callers always get a non-empty
    set and never see a FetchError.
    """

    def __init__(
        self,
        sources: Mapping[TransportMode, Sequence[DepartureSource]],
        clock: Clock,
        per_source_timeout_seconds: float = 8.0,
    ) -> None:
        """Initialize the resolver.

        Args:
            sources: Sources per mode, highest priority first.
            clock: Clock used for the last-resort synthetic departures.
            per_source_timeout_seconds: Time budget for each individual source call.
        """
        self._sources = {mode: list(mode_sources) for mode, mode_sources in sources.items()}
        self._clock = clock
        self._per_source_timeout_seconds = per_source_timeout_seconds

    def sources_for(self, mode: TransportMode) -> list[DepartureSource]:
        """Get the configured sources for a mode in priority order."""
        return list(self._sources.get(mode, []))

    async def resolve(
        self,
        mode: TransportMode,
        stop_config: StopConfiguration,
        deadline: Deadline | None = None,
    ) -> DepartureSet:
        """Resolve departures for a mode from the highest-priority working source.

        Once the overall deadline has passed, live sources are skipped but timetable
        tiers, which need no network, are still tried on their own per-source budget.
        """
        for source in self._sources.get(mode, []):
            source_deadline = Deadline.after(self._per_source_timeout_seconds)
            if deadline is not None and deadline.expired:
                if source.tier.is_live:
                    logger.warning(
                        f"Refresh deadline passed before {source.name} could be tried for {mode.value}"
                    )
                    continue
            else:
                source_deadline = source_deadline.earliest(deadline)

            try:
                result = await source.fetch(mode, stop_config, source_deadline)
            except FetchError as e:
                logger.warning(f"Source {source.name} failed for {mode.value}: {e}")
                continue
            except Exception:
                logger.exception(f"Source {source.name} raised an unexpected error for {mode.value}")
                continue

            if not self._is_well_formed(result, mode):
                logger.info(
                    f"Source {source.name} returned no usable {mode.value} departures, "
                    "trying next tier"
                )
                continue

            logger.debug(
                f"Resolved {len(result)} {mode.value} departure(s) from {source.name} "
                f"(tier {source.tier.name})"
            )
            return result

        logger.error(f"All sources failed for {mode.value}, falling back to synthetic departures")
        return DepartureSet.from_departures(
            mode,
            synthetic_departures(stop_config, self._clock.now()),
            SourceTier.SYNTHETIC,
            SYNTHETIC_SOURCE_NAME,
            stop_config.max_departures,
        )

    @staticmethod
    def _is_well_formed(result: DepartureSet, mode: TransportMode) -> bool:
        if not isinstance(result, DepartureSet) or result.is_empty:
            return False
        return all(
            departure.mode is mode and departure.departure_time.tzinfo is not None
            for departure in result.departures
        )
