"""Analyzers built on the percentile estimator."""

from .percentile import PercentileAnalyzer

__all__ = ["PercentileAnalyzer"]
