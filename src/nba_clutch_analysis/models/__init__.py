"""Models module for NBA clutch analysis."""

from .significance import SignificanceResult, SignificanceTester

__all__ = ['SignificanceTester', 'SignificanceResult']
