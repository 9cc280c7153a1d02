"""Background poller keeping the departure cache warm."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from commute_coffee.domain.contracts.refresh_poller import RefreshPollerProtocol

if TYPE_CHECKING:
    from commute_coffee.domain.contracts.refresh_scheduler import RefreshSchedulerProtocol

logger = logging.getLogger(__name__)


class RefreshPoller(RefreshPollerProtocol):
    """Periodically asks the scheduler to refresh, independent of readers.

    The scheduler decides whether a refresh is due, so polling more often than the TTL
    only costs a freshness check.
    """

    def __init__(self, scheduler: RefreshSchedulerProtocol, interval_seconds: float) -> None:
        """Initialize the poller.

        Args:
            scheduler: Scheduler owning the cache.
            interval_seconds: Delay between freshness checks.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the refresh poller."""
        if self.running:
            logger.warning("Refresh poller already running")
            return

        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Started refresh poller (every {self.interval_seconds:g}s)")

    async def stop(self) -> None:
        """Stop the refresh poller."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info("Refresh poller cancelled")
            logger.info("Stopped refresh poller")
        self._task = None

    async def _poll_loop(self) -> None:
        """Main polling loop."""
        # Warm the cache immediately
        await self._refresh_once()

        while True:
            await asyncio.sleep(self.interval_seconds)
            await self._refresh_once()

    async def _refresh_once(self) -> None:
        try:
            await self.scheduler.ensure_fresh()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Refresh poller failed to refresh the cache")
