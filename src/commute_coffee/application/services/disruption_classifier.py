"""Keyword-based disruption classifier for service alerts."""

import logging
from collections.abc import Iterable

from commute_coffee.domain.models.disruption_signal import DisruptionSignal
from commute_coffee.domain.models.service_alert import ServiceAlert

logger = logging.getLogger(__name__)

DEFAULT_DISRUPTION_KEYWORDS: tuple[str, ...] = (
    "Major Delays",
    "Suspended",
    "Buses replace",
    "Cancellation",
    "Cancelled",
    "Not running",
)


class DisruptionClassifier:
    """Flags alert text that mentions a known disruption keyword.

    Matching is case-insensitive substring search. No further interpretation of the
    text is attempted.
    """

    def __init__(self, keywords: Iterable[str] = DEFAULT_DISRUPTION_KEYWORDS) -> None:
        self._keywords = tuple(k.strip().casefold() for k in keywords if k.strip())

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    def classify(self, alert_text: str) -> DisruptionSignal:
        """Classify one piece of alert text."""
        folded = alert_text.casefold()
        if not any(keyword in folded for keyword in self._keywords):
            return DisruptionSignal.none()
        headline = next((line.strip() for line in alert_text.splitlines() if line.strip()), "")
        return DisruptionSignal(is_disrupted=True, headline=headline)

    def classify_alerts(self, alerts: Iterable[ServiceAlert]) -> DisruptionSignal:
        """Return the signal of the first disrupting alert, headed by its header."""
        for alert in alerts:
            if self.classify(alert.text).is_disrupted:
                logger.info(f"Disruption detected: {alert.header}")
                return DisruptionSignal(is_disrupted=True, headline=alert.header)
        return DisruptionSignal.none()
