"""Schema definitions for SampleIQ."""

from .schema import AnalysisResult, PercentileRequest, PercentileResult, ValidRange

__all__ = ["AnalysisResult", "PercentileRequest", "PercentileResult", "ValidRange"]
