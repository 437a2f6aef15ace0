"""Base class for analyzers that run the percentile estimator."""

from abc import ABC, abstractmethod
from typing import Any

from sampleiq.configs import Config, EstimatorSettings
from sampleiq.schemas import AnalysisResult


class BaseAnalyzer(ABC):
    """Analyzer bound to one set of estimator settings.

    Settings are read from the config once, at construction, so every
    ``analyze`` call on the same instance estimates the same percentiles.
    """

    def __init__(self, name: str, config: Config | None = None):
        self.name = name
        self.config = config
        self.settings = EstimatorSettings.from_config(config)
        self.results: list[AnalysisResult] = []

    @abstractmethod
    def analyze(self, data: Any) -> AnalysisResult:
        """Perform analysis on data."""

    def add_result(self, result: AnalysisResult) -> None:
        self.results.append(result)

    def get_results(self) -> list[AnalysisResult]:
        return self.results

    def latest(self) -> AnalysisResult | None:
        """Most recent result, or None before the first analysis."""
        return self.results[-1] if self.results else None
