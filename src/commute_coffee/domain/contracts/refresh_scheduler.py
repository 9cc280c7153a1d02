"""Protocol for the component that keeps the cache fresh."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from commute_coffee.domain.models.cache_entry import CacheEntry


class RefreshSchedulerProtocol(Protocol):
    """Refreshes the cache on demand, at most once at a time."""

    async def ensure_fresh(self) -> "CacheEntry":
        """Refresh if the cached entry is stale and return the current entry."""
        ...

    async def force_refresh(self) -> "CacheEntry":
        """Refresh regardless of freshness and return the new entry."""
        ...

    async def close(self) -> None:
        """Cancel any refresh in flight and stop refreshing."""
        ...
