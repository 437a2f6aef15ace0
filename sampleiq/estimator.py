"""Percentile estimation over samples containing missing-value sentinels.

The estimator filters a sample to an optional inclusive valid range, sorts a
private copy of what remains, and reads off the value at a fractional
percentile using the ``rank = p * (n + 1)`` convention:

- ``rank < 1`` returns the minimum,
- ``rank > n`` returns the maximum,
- an integral rank ``k`` returns the k-th smallest value,
- anything else interpolates linearly between its two neighbours.

All arithmetic runs in one dtype: ``float32`` by default, ``float64`` with
``high_precision=True``. The sample, the percentile and the range bounds are
cast before any comparison so results are reproducible.
"""

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from sampleiq.schemas import PercentileRequest, PercentileResult, ValidRange
from sampleiq.utils.errors import InsufficientDataError, InvalidArgumentError, SampleIQError

MIN_SAMPLE_SIZE = 3

# Integer and floating-point kinds; bool ('b') and complex ('c') are excluded
_NUMERIC_KINDS = ("i", "u", "f")


def is_numeric(value: Any) -> bool:
    """Return True if value is a real number or an array of real numbers.

    Booleans, complex numbers, strings and object arrays are not numeric.
    """
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, float, np.integer, np.floating)):
        return True
    try:
        arr = np.asarray(value)
    except (TypeError, ValueError):
        return False
    return arr.size > 0 and arr.dtype.kind in _NUMERIC_KINDS


def _as_sample_array(sample: Any, dtype: type) -> np.ndarray:
    try:
        raw = np.asarray(sample)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"sample is not a numeric array: {e}") from e
    if raw.dtype.kind not in _NUMERIC_KINDS:
        raise InvalidArgumentError(f"sample must contain only integer or floating-point values, got dtype {raw.dtype}")
    if raw.size < MIN_SAMPLE_SIZE:
        raise InvalidArgumentError(f"sample needs at least {MIN_SAMPLE_SIZE} elements, got {raw.size}")
    # astype always copies, so the caller's array is never touched
    return raw.astype(dtype).ravel()


def _prepare(sample: Any, request: PercentileRequest) -> np.ndarray:
    """Return the sorted working sample (a private copy)."""
    dtype = request.dtype
    values = _as_sample_array(sample, dtype)

    if request.valid_range is not None:
        lower = dtype(request.valid_range.lower)
        upper = dtype(request.valid_range.upper)
        working = values[(values >= lower) & (values <= upper)]
    else:
        if np.isnan(values).any():
            raise InvalidArgumentError("sample contains NaN; pass valid_range to treat NaN as missing")
        working = values

    if working.size < MIN_SAMPLE_SIZE:
        raise InsufficientDataError(
            f"{working.size} valid values remain after filtering; at least {MIN_SAMPLE_SIZE} are required"
        )

    if request.valid_range is not None or not request.pre_sorted:
        working = np.sort(working, kind="stable")
    return working


def _interpolate(lower: np.floating, upper: np.floating, fraction: np.floating) -> np.floating:
    # interpolating across an infinite neighbour would yield NaN
    if lower == upper or np.isinf(lower):
        return lower
    if np.isinf(upper):
        return upper
    with np.errstate(over="ignore"):
        span = upper - lower
    if np.isfinite(span):
        value = lower + fraction * span
    else:
        # neighbours more than the dtype's max apart
        value = (1 - fraction) * lower + fraction * upper
    return min(max(value, lower), upper)


def _threshold(sorted_values: np.ndarray, request: PercentileRequest) -> np.floating:
    dtype = request.dtype
    count = sorted_values.size
    rank = dtype(request.percentile) * dtype(count + 1)

    if rank < 1.0:
        return sorted_values[0]
    if rank > count:
        return sorted_values[count - 1]

    k = int(np.floor(rank))
    fraction = rank - dtype(k)
    if fraction == 0.0:
        return sorted_values[k - 1]
    return _interpolate(sorted_values[k - 1], sorted_values[k], fraction)


def _result(sorted_values: np.ndarray, request: PercentileRequest) -> PercentileResult:
    return PercentileResult(
        threshold=float(_threshold(sorted_values, request)),
        valid_min=float(sorted_values[0]),
        valid_max=float(sorted_values[-1]),
        valid_count=int(sorted_values.size),
        percentile=float(request.percentile),
    )


def estimate(
    sample: Any,
    percentile: float,
    valid_range: ValidRange | Sequence | None = None,
    pre_sorted: bool = False,
    high_precision: bool = False,
) -> PercentileResult:
    """Estimate the value at a fractional percentile of a sample.

    Args:
        sample: Numeric sequence or array (multi-dimensional input is flattened)
        percentile: Fraction in [0.0, 1.0]; 0.5 is the median
        valid_range: Optional inclusive (lower, upper) bounds; values outside
            are treated as missing. Omitting it disables filtering.
        pre_sorted: Skip sorting when the sample is already ascending.
            Ignored whenever valid_range is given.
        high_precision: Use float64 arithmetic instead of float32

    Returns:
        PercentileResult with threshold, valid_min, valid_max and valid_count

    Raises:
        InvalidArgumentError: Bad percentile, non-numeric or too-short sample,
            or malformed valid_range
        InsufficientDataError: Fewer than three values survive filtering
    """
    request = PercentileRequest(percentile, valid_range, pre_sorted, high_precision)
    return _result(_prepare(sample, request), request)


def estimate_many(
    sample: Any,
    percentiles: Iterable[float],
    valid_range: ValidRange | Sequence | None = None,
    pre_sorted: bool = False,
    high_precision: bool = False,
) -> list[PercentileResult]:
    """Estimate several percentiles of one sample, filtering and sorting once.

    Every percentile is validated before the sample is touched, so a bad
    entry fails the whole call.

    Returns:
        One PercentileResult per requested percentile, in request order
    """
    requested = list(percentiles)
    if not requested:
        raise InvalidArgumentError("at least one percentile is required")
    first = PercentileRequest(requested[0], valid_range, pre_sorted, high_precision)
    requests = [first] + [first.with_percentile(p) for p in requested[1:]]
    working = _prepare(sample, first)
    return [_result(working, request) for request in requests]


def try_estimate(
    sample: Any,
    percentile: float,
    valid_range: ValidRange | Sequence | None = None,
    pre_sorted: bool = False,
    high_precision: bool = False,
) -> tuple[PercentileResult, str | None]:
    """Like ``estimate`` but report failure as ``(sentinel_result, message)``.

    On failure the result comes from ``PercentileResult.unavailable`` and the
    message describes the problem; on success the message is None.
    """
    try:
        return estimate(sample, percentile, valid_range, pre_sorted, high_precision), None
    except SampleIQError as e:
        echoed = None if isinstance(percentile, bool) or not isinstance(percentile, (int, float)) else percentile
        return PercentileResult.unavailable(echoed), str(e)
