"""Synthetic departure adapter."""

from commute_coffee.adapters.synthetic.synthetic_departure_source import SyntheticDepartureSource

__all__ = ["SyntheticDepartureSource"]
