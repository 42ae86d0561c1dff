"""Utils module for NBA clutch analysis."""

from .metrics import ClutchAggregator

__all__ = ['ClutchAggregator']
