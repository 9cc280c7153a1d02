"""Service alert provider port."""

from typing import Protocol

from commute_coffee.domain.models.deadline import Deadline
from commute_coffee.domain.models.service_alert import ServiceAlert


class AlertProvider(Protocol):
    """Port for operator service alerts."""

    async def current_alerts(self, deadline: Deadline) -> list[ServiceAlert]:
        """Get active alerts. Raises FetchError on failure."""
        ...
