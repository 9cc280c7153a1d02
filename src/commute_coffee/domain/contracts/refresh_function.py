"""Protocol for the function a refresh cycle runs."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from commute_coffee.domain.models.cache_entry import CacheEntry
    from commute_coffee.domain.models.deadline import Deadline


class RefreshFunction(Protocol):
    """Builds a new cache entry from upstream sources."""

    async def __call__(self, previous: "CacheEntry", deadline: "Deadline") -> "CacheEntry":
        """Fetch everything tracked and return a new entry.

        Args:
            previous: The entry currently cached, used for categories that fail.
            deadline: Overall deadline for the cycle.
        """
        ...
