"""Service alerts from a GTFS-Realtime ServiceAlerts feed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from commute_coffee.adapters.gtfs.feed_decoder import decode_feed, translated_text
from commute_coffee.adapters.upstream_http_client import UpstreamHttpClient, upstream_errors
from commute_coffee.domain.models.service_alert import ServiceAlert

if TYPE_CHECKING:
    import aiohttp
    from google.transit import gtfs_realtime_pb2

    from commute_coffee.domain.models.deadline import Deadline
    from commute_coffee.domain.ports.clock import Clock

logger = logging.getLogger(__name__)


class GtfsRealtimeAlertProvider:
    """Currently active service alerts, in English where a translation exists."""

    name = "gtfs-realtime-alerts"

    def __init__(
        self,
        clock: Clock,
        session: aiohttp.ClientSession | None,
        service_alerts_url: str,
        api_key: str | None = None,
        language: str = "en",
    ) -> None:
        self._clock = clock
        self._http = UpstreamHttpClient(self.name, session)
        self._url = service_alerts_url
        self._headers = {"KeyId": api_key} if api_key else None
        self._language = language

    async def current_alerts(self, deadline: Deadline) -> list[ServiceAlert]:
        """Fetch the alerts active now.

        Raises:
            FetchError: If the feed cannot be fetched or decoded.
        """
        async with upstream_errors(self.name, deadline):
            payload = await self._http.get_bytes(self._url, deadline, headers=self._headers)
            feed = decode_feed(payload, self.name)

        now_epoch = int(self._clock.now().timestamp())
        alerts: list[ServiceAlert] = []
        for entity in feed.entity:
            if not entity.HasField("alert") or not _is_active(entity.alert, now_epoch):
                continue
            header = translated_text(entity.alert.header_text, self._language)
            description = translated_text(entity.alert.description_text, self._language)
            if not header and not description:
                continue
            alerts.append(ServiceAlert(header=header or description, description=description))

        logger.debug(f"{self.name}: {len(alerts)} active alert(s) of {len(feed.entity)} entities")
        return alerts


def _is_active(alert: gtfs_realtime_pb2.Alert, now_epoch: int) -> bool:
    """An alert without active periods is always active. Zero bounds are open-ended."""
    if not alert.active_period:
        return True
    return any(
        (not period.start or period.start <= now_epoch) and (not period.end or now_epoch <= period.end)
        for period in alert.active_period
    )
