"""Rate limiter for outgoing upstream requests.

Keeps a minimum delay between requests to one upstream so rate-limited APIs are not
hit in bursts when several modes refresh at once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind

if TYPE_CHECKING:
    from commute_coffee.domain.models.deadline import Deadline

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Minimum-interval limiter shared by every request to one upstream.

    Async-safe using asyncio.Lock. A request that would have to wait past its
    deadline fails fast with a timeout instead of sleeping.
    """

    def __init__(self, api_name: str, min_interval_seconds: float = 1.0) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the upstream (for logging and errors).
            min_interval_seconds: Minimum delay between requests in seconds.
        """
        self.api_name = api_name
        self.min_interval_seconds = min_interval_seconds
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    async def acquire(self, deadline: Deadline | None = None) -> None:
        """Wait until the next request is allowed.

        Raises:
            FetchError: With kind TIMEOUT if the wait would overrun the deadline.
        """
        async with self._lock:
            wait_time = 0.0
            if self._last_request_time is not None:
                elapsed = time.monotonic() - self._last_request_time
                wait_time = self.min_interval_seconds - elapsed

            if wait_time > 0:
                if deadline is not None and wait_time >= deadline.remaining():
                    raise FetchError(
                        FetchErrorKind.TIMEOUT,
                        f"rate limit wait of {wait_time:.2f}s exceeds deadline",
                        source_name=self.api_name,
                    )
                logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                await asyncio.sleep(wait_time)

            self._last_request_time = time.monotonic()
