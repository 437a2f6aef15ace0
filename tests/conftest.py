"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest


def _temp_csv_file():
    """Create a temporary CSV file for testing (close before yield for Windows)."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False) as f:
        f.write("workload,latency_ms\n")
        f.write("a,10\n")
        f.write("a,20\n")
        f.write("a,30\n")
        f.write("a,40\n")
        f.write("b,5\n")
        f.write("b,\n")
        f.write("b,-99\n")
        f.write("b,7\n")
        f.write("c,3\n")
        f.write("c,1\n")
        f.write("c,2\n")
        f.flush()
        name = f.name
    try:
        yield name
    finally:
        Path(name).unlink(missing_ok=True)


@pytest.fixture
def temp_csv_file():
    """Create a temporary CSV file with a workload group column and a sentinel value."""
    yield from _temp_csv_file()


@pytest.fixture
def sentinel_sample():
    """Sample with -99 missing-value sentinels."""
    return [1, 7, 3, -99, 4, 5, -99, 9, 6, 2, 8]


@pytest.fixture
def range_config_file(tmp_path):
    """YAML config that treats anything outside [0, 1000] as missing."""
    path = tmp_path / "sampleiq.yaml"
    path.write_text(
        "estimator:\n"
        "  percentiles: [0.5]\n"
        "  valid_range: [0, 1000]\n"
        "  high_precision: true\n"
    )
    return str(path)
