"""Shared utilities: errors, analyzer base class, data loading and sample statistics."""

from .errors import ConfigError, InsufficientDataError, InvalidArgumentError, SampleIQError

__all__ = [
    "SampleIQError",
    "InvalidArgumentError",
    "InsufficientDataError",
    "ConfigError",
]
