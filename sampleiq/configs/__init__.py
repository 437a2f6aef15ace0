"""Configuration loading for SampleIQ."""

from .config import DEFAULT_CONFIG, ESTIMATOR_SECTION, Config, ConfigManager, EstimatorSettings

__all__ = [
    "DEFAULT_CONFIG",
    "ESTIMATOR_SECTION",
    "Config",
    "ConfigManager",
    "EstimatorSettings",
]
