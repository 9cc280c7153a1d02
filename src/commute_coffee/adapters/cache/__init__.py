"""Departure cache adapters."""

from commute_coffee.adapters.cache.interpolating_departure_cache import (
    InterpolatingDepartureCache,
)

__all__ = ["InterpolatingDepartureCache"]
