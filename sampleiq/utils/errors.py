"""Custom exceptions for SampleIQ.

This module defines application-specific errors so callers can tell
malformed input apart from samples that are simply too small to estimate.
"""


class SampleIQError(Exception):
    """Base exception for all SampleIQ errors."""

    pass


class InvalidArgumentError(SampleIQError, ValueError):
    """Raised for malformed caller input (percentile out of range, non-numeric sample, bad range)."""

    pass


class InsufficientDataError(SampleIQError, ValueError):
    """Raised when fewer than the minimum number of valid values remain after filtering."""

    pass


class ConfigError(SampleIQError):
    """Raised when configuration is invalid or a required config file is missing."""

    pass
