"""Refresh scheduler guarding the departure cache."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from commute_coffee.domain.models.deadline import Deadline

if TYPE_CHECKING:
    from datetime import datetime

    from commute_coffee.domain.contracts.departure_cache import DepartureCacheProtocol
    from commute_coffee.domain.contracts.refresh_function import RefreshFunction
    from commute_coffee.domain.models.cache_entry import CacheEntry
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)

# Extra time the cycle gets past its own deadline before it is abandoned, so a resolver
# that falls back to synthetic data right at the deadline can still hand it over.
_TIMEOUT_GRACE_SECONDS = 0.5


class RefreshScheduler:
    """Decides on access whether the cache is stale and refreshes it at most once at a time.

    The scheduler is the only writer of the cache. A refresh that times out or fails
    keeps the previous contents but still restarts the TTL window, so an unreachable
    upstream is not hammered on every read.
    """

    def __init__(
        self,
        cache: DepartureCacheProtocol,
        refresh_fn: RefreshFunction,
        clock: Clock,
        ttl_seconds: float = 60.0,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the scheduler.

        Args:
            cache: Cache to keep fresh.
            refresh_fn: Builds a new cache entry from upstream.
            clock: Wall clock used for fetch times.
            ttl_seconds: How long a refresh stays fresh.
            timeout_seconds: Overall deadline of one refresh cycle.
        """
        self._cache = cache
        self._refresh_fn = refresh_fn
        self._clock = clock
        self._ttl_seconds = ttl_seconds
        self._timeout_seconds = timeout_seconds
        self._in_flight: asyncio.Task[CacheEntry] | None = None
        self._closed = False

    @property
    def refresh_in_flight(self) -> bool:
        """Whether a refresh is currently running."""
        return self._in_flight is not None and not self._in_flight.done()

    def is_fresh(self, now: datetime | None = None) -> bool:
        """Whether the cached entry is younger than the TTL."""
        last_fetch_at = self._cache.snapshot().last_fetch_at
        if last_fetch_at is None:
            return False
        now = now or self._clock.now()
        return (now - last_fetch_at).total_seconds() < self._ttl_seconds

    async def ensure_fresh(self) -> CacheEntry:
        """Refresh the cache if it is stale, joining a refresh already in flight."""
        if self.is_fresh():
            return self._cache.snapshot()
        return await self._join_or_start()

    async def force_refresh(self) -> CacheEntry:
        """Refresh regardless of the TTL, still joining a refresh already in flight."""
        return await self._join_or_start()

    async def close(self) -> None:
        """Cancel a refresh in flight and start no new ones.

        Must run before the HTTP session the refresh function uses is closed.
        """
        self._closed = True
        task = self._in_flight
        self._in_flight = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Cancelled refresh in flight")

    async def _join_or_start(self) -> CacheEntry:
        if self._closed:
            logger.debug("Scheduler closed, serving cached data")
            return self._cache.snapshot()
        if not self.refresh_in_flight:
            self._in_flight = asyncio.create_task(self._run_refresh())
        else:
            logger.debug("Refresh already in flight, waiting for it")
        # Shielded so a cancelled reader does not abort the refresh other readers wait on
        return await asyncio.shield(self._in_flight)

    async def _run_refresh(self) -> CacheEntry:
        previous = self._cache.snapshot()
        deadline = Deadline.after(self._timeout_seconds)
        logger.info("Refreshing departures")
        try:
            async with asyncio.timeout(self._timeout_seconds + _TIMEOUT_GRACE_SECONDS):
                entry = await self._refresh_fn(previous, deadline)
        except TimeoutError:
            logger.warning(
                f"Refresh did not finish within {self._timeout_seconds}s, keeping previous data"
            )
            entry = previous
        except Exception:
            logger.exception("Refresh failed, keeping previous data")
            entry = previous

        entry = entry.touched(self._clock.now())
        self._cache.replace(entry)
        return entry
