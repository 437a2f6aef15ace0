"""Tests for SampleIQ schema dataclasses."""

import math
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from sampleiq import (
    AnalysisResult,
    InvalidArgumentError,
    PercentileRequest,
    PercentileResult,
    ValidRange,
    estimate,
)


class TestValidRange:
    """ValidRange construction and coercion."""

    def test_bounds_are_inclusive(self):
        result = estimate([0, 5, 10, 10.5, -1], 1.0, valid_range=ValidRange(0, 10))
        assert result.valid_count == 3
        assert result.valid_max == 10

    def test_zero_is_a_real_bound(self):
        """A bound of zero is not confused with 'unset'."""
        result = estimate([0.0, 0.0, 0.0, -1.0, 1.0], 0.5, valid_range=ValidRange(0.0, 0.0))
        assert result.valid_count == 3
        assert result.threshold == 0.0

    def test_unbounded_keeps_infinities(self):
        r = ValidRange.unbounded()
        assert r == ValidRange(-math.inf, math.inf)
        result = estimate([-math.inf, 1.0, math.nan, 2.0, math.inf], 0.5, valid_range=r)
        assert result.valid_count == 4

    def test_coerce_passthrough(self):
        r = ValidRange(1, 2)
        assert ValidRange.coerce(r) is r

    def test_coerce_sequence_and_mapping(self):
        assert ValidRange.coerce([1, 2]) == ValidRange(1, 2)
        assert ValidRange.coerce({"lower": -math.inf, "upper": 5}) == ValidRange(-math.inf, 5)

    def test_coerce_rejects_string(self):
        with pytest.raises(InvalidArgumentError):
            ValidRange.coerce("0,10")

    def test_missing_mapping_key(self):
        with pytest.raises(InvalidArgumentError, match="unset"):
            ValidRange.coerce({"lower": 0})

    def test_frozen(self):
        r = ValidRange(0, 1)
        with pytest.raises(FrozenInstanceError):
            r.lower = 5

    def test_to_dict(self):
        assert ValidRange(0, 100).to_dict() == {"lower": 0, "upper": 100}


class TestPercentileRequest:
    """PercentileRequest validation and normalization."""

    @pytest.mark.parametrize("percentile", [1.00000001, -1e-50, math.nan, 2])
    def test_rejects_out_of_range_before_cast(self, percentile):
        with pytest.raises(InvalidArgumentError):
            PercentileRequest(percentile)

    @pytest.mark.parametrize("percentile", [True, "0.5", None])
    def test_rejects_non_real(self, percentile):
        with pytest.raises(InvalidArgumentError, match="real number"):
            PercentileRequest(percentile)

    def test_range_is_coerced(self):
        request = PercentileRequest(0.5, valid_range=[0, 100])
        assert request.valid_range == ValidRange(0, 100)

    def test_dtype_follows_precision(self):
        assert PercentileRequest(0.5).dtype is np.float32
        assert PercentileRequest(0.5, high_precision=True).dtype is np.float64

    def test_with_percentile_keeps_options(self):
        request = PercentileRequest(0.5, valid_range=(0, 100), pre_sorted=True, high_precision=True)
        other = request.with_percentile(0.9)
        assert other.percentile == 0.9
        assert other.valid_range == request.valid_range
        assert other.pre_sorted and other.high_precision

    def test_with_percentile_validates(self):
        with pytest.raises(InvalidArgumentError):
            PercentileRequest(0.5).with_percentile(1.5)


class TestPercentileResult:
    """PercentileResult helpers."""

    def test_to_dict(self):
        result = PercentileResult(threshold=25.0, valid_min=10.0, valid_max=40.0, valid_count=4, percentile=0.5)
        assert result.to_dict() == {
            "percentile": 0.5,
            "threshold": 25.0,
            "valid_min": 10.0,
            "valid_max": 40.0,
            "valid_count": 4,
        }

    def test_unavailable_sentinel(self):
        result = PercentileResult.unavailable()
        assert result.valid_count == 0
        assert result.threshold == math.inf
        assert result.valid_min > result.valid_max
        assert not result.is_valid


class TestAnalysisResult:
    """AnalysisResult serialization."""

    def test_to_dict_excludes_raw_data(self):
        result = AnalysisResult(name="x", metrics={"a": {"p50": 1.0}}, raw_data=[1, 2, 3])
        d = result.to_dict()
        assert d["name"] == "x"
        assert d["metrics"] == {"a": {"p50": 1.0}}
        assert "raw_data" not in d
        assert "timestamp" in d
