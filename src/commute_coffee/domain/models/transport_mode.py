"""Transport mode domain model."""

from enum import StrEnum


class TransportMode(StrEnum):
    """Kind of vehicle a departure belongs to."""

    TRAIN = "train"
    TRAM = "tram"
