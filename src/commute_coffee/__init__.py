"""Commute coffee: departure aggregation and coffee decisions for a commute dashboard."""

__version__ = "0.1.0"
