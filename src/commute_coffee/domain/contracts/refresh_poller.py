"""Protocol for background refresh polling."""

from typing import Protocol


class RefreshPollerProtocol(Protocol):
    """Protocol for keeping the cache warm in the background."""

    async def start(self) -> None:
        """Start the poller."""
        ...

    async def stop(self) -> None:
        """Stop the poller."""
        ...
