"""Disruption signal domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DisruptionSignal:
    """Result of scanning service alerts for disruption keywords."""

    is_disrupted: bool = False
    headline: str = ""

    @classmethod
    def none(cls) -> "DisruptionSignal":
        """Signal for an undisrupted network."""
        return cls()
