"""Result and request schema definitions for SampleIQ."""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import numpy as np

from sampleiq.utils.errors import InvalidArgumentError


def _is_real(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


@dataclass(frozen=True)
class ValidRange:
    """Inclusive interval separating real observations from missing-value sentinels."""

    lower: float
    upper: float

    def __post_init__(self) -> None:
        for name, bound in (("lower", self.lower), ("upper", self.upper)):
            if bound is None:
                raise InvalidArgumentError(f"valid_range {name} bound is unset")
            if not _is_real(bound):
                raise InvalidArgumentError(f"valid_range {name} bound must be numeric, got {bound!r}")
            if math.isnan(bound):
                raise InvalidArgumentError(f"valid_range {name} bound is NaN")
        if self.lower > self.upper:
            raise InvalidArgumentError(f"valid_range lower bound {self.lower} exceeds upper bound {self.upper}")

    @classmethod
    def unbounded(cls) -> "ValidRange":
        """Range accepting every ordered value; only NaN falls outside it."""
        return cls(-math.inf, math.inf)

    @classmethod
    def coerce(cls, value: Any) -> "ValidRange":
        """Build a ValidRange from a ValidRange, a (lower, upper) pair or a mapping.

        Args:
            value: ValidRange, 2-item sequence, or mapping with 'lower'/'upper' keys

        Returns:
            ValidRange instance
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(value.get("lower"), value.get("upper"))
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            if len(value) != 2:
                raise InvalidArgumentError(f"valid_range needs exactly two bounds, got {len(value)}")
            return cls(value[0], value[1])
        raise InvalidArgumentError(f"Cannot interpret {value!r} as a valid range")

    def to_dict(self) -> dict[str, float]:
        return {"lower": self.lower, "upper": self.upper}


@dataclass(frozen=True)
class PercentileRequest:
    """Validated options for a single percentile estimate.

    The percentile is checked against [0, 1] as given, before any cast to the
    working precision, and valid_range is normalized to a ValidRange.
    """

    percentile: float
    valid_range: ValidRange | None = None
    pre_sorted: bool = False
    high_precision: bool = False

    def __post_init__(self) -> None:
        if not _is_real(self.percentile):
            raise InvalidArgumentError(f"percentile must be a real number, got {self.percentile!r}")
        # NaN fails both comparisons
        if not (0.0 <= self.percentile <= 1.0):
            raise InvalidArgumentError(f"percentile must lie in [0.0, 1.0], got {self.percentile!r}")
        if self.valid_range is not None:
            object.__setattr__(self, "valid_range", ValidRange.coerce(self.valid_range))

    @property
    def dtype(self) -> type:
        """Working dtype: float64 for high precision, float32 otherwise."""
        return np.float64 if self.high_precision else np.float32

    def with_percentile(self, percentile: float) -> "PercentileRequest":
        """Same options for another percentile."""
        return PercentileRequest(percentile, self.valid_range, self.pre_sorted, self.high_precision)


@dataclass(frozen=True)
class PercentileResult:
    """Outcome of a percentile estimate over the valid part of a sample."""

    threshold: float
    valid_min: float
    valid_max: float
    valid_count: int
    percentile: float | None = None

    @classmethod
    def unavailable(cls, percentile: float | None = None) -> "PercentileResult":
        """Sentinel result for a failed estimate (values carry no meaning)."""
        return cls(
            threshold=math.inf,
            valid_min=math.inf,
            valid_max=-math.inf,
            valid_count=0,
            percentile=percentile,
        )

    @property
    def is_valid(self) -> bool:
        return self.valid_count > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "percentile": self.percentile,
            "threshold": self.threshold,
            "valid_min": self.valid_min,
            "valid_max": self.valid_max,
            "valid_count": self.valid_count,
        }


@dataclass
class AnalysisResult:
    """Base schema for analysis results."""

    name: str
    timestamp: datetime = field(default_factory=datetime.now)
    metrics: dict[str, Any] = field(default_factory=dict)
    raw_data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "name": self.name,
            "timestamp": self.timestamp.isoformat(),
            "metrics": self.metrics,
        }
