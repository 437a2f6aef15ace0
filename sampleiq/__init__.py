"""SampleIQ - percentile estimation over samples with missing-value sentinels.

Provides:
- estimator (estimate, estimate_many, try_estimate, is_numeric)
- schemas (ValidRange, PercentileRequest, PercentileResult, AnalysisResult)
- configs (Config, ConfigManager, EstimatorSettings)
- utils (DataLoader, SampleStats, PercentileAnalyzer, errors)
"""

__version__ = "0.1.0"

from sampleiq.configs import DEFAULT_CONFIG, Config, ConfigManager, EstimatorSettings
from sampleiq.estimator import MIN_SAMPLE_SIZE, estimate, estimate_many, is_numeric, try_estimate
from sampleiq.schemas import AnalysisResult, PercentileRequest, PercentileResult, ValidRange
from sampleiq.utils.analysis_utils import DataLoader, SampleStats
from sampleiq.utils.analyzers import PercentileAnalyzer
from sampleiq.utils.errors import (
    ConfigError,
    InsufficientDataError,
    InvalidArgumentError,
    SampleIQError,
)

__all__ = [
    "__version__",
    "MIN_SAMPLE_SIZE",
    "estimate",
    "estimate_many",
    "try_estimate",
    "is_numeric",
    "ValidRange",
    "PercentileRequest",
    "PercentileResult",
    "AnalysisResult",
    "DEFAULT_CONFIG",
    "Config",
    "ConfigManager",
    "EstimatorSettings",
    "DataLoader",
    "SampleStats",
    "PercentileAnalyzer",
    "SampleIQError",
    "InvalidArgumentError",
    "InsufficientDataError",
    "ConfigError",
]
