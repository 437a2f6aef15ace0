"""Data loading and sample statistics (DataLoader, SampleStats)."""

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd

from sampleiq.estimator import estimate_many
from sampleiq.schemas import ValidRange


class DataLoader:
    """Load and validate data for analysis."""

    @staticmethod
    def load_csv(filepath: str) -> pd.DataFrame:
        """Load CSV file safely."""
        try:
            return pd.read_csv(filepath)
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {filepath}")
        except (pd.errors.ParserError, pd.errors.EmptyDataError):
            raise ValueError(f"Invalid CSV format: {filepath}")

    @staticmethod
    def validate_columns(df: pd.DataFrame, required_cols: list[str]) -> bool:
        """Validate that required columns exist."""
        missing = set(required_cols) - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {missing}")
        return True

    @staticmethod
    def column_values(df: pd.DataFrame, column: str) -> np.ndarray:
        """Return a column as a float array; blank or non-numeric cells become NaN."""
        return pd.to_numeric(df[column], errors="coerce").to_numpy(dtype=np.float64)

    @staticmethod
    def load_sample(filepath: str, column: str) -> np.ndarray:
        """Load one numeric column of a CSV file.

        Args:
            filepath: Path to CSV file
            column: Column holding the sample values

        Returns:
            Float array of the column values (missing cells as NaN)
        """
        df = DataLoader.load_csv(filepath)
        DataLoader.validate_columns(df, [column])
        return DataLoader.column_values(df, column)


def percentile_key(percentile: float) -> str:
    """Label for a fractional percentile: 0.5 -> 'p50', 0.999 -> 'p99.9'."""
    scaled = round(percentile * 100, 6)
    if scaled == int(scaled):
        return f"p{int(scaled)}"
    return f"p{scaled:g}"


class SampleStats:
    """Calculate percentile statistics over a sample."""

    @staticmethod
    def calculate_percentiles(
        values: Sequence[float] | np.ndarray,
        percentiles: Sequence[float] = (0.5, 0.95, 0.99),
        valid_range: ValidRange | Sequence | None = None,
        high_precision: bool = False,
    ) -> dict[str, Any]:
        """Calculate percentile values plus min/max/count of the valid sample.

        Args:
            values: Sample values
            percentiles: Fractions in [0, 1] to estimate
            valid_range: Optional inclusive bounds; other values count as missing
            high_precision: Use float64 arithmetic

        Returns:
            Dictionary like {"p50": .., "p95": .., "min": .., "max": .., "count": ..};
            empty if values is empty
        """
        if len(values) == 0:
            return {}

        results = estimate_many(
            values,
            percentiles,
            valid_range=valid_range,
            high_precision=high_precision,
        )
        stats: dict[str, Any] = {percentile_key(r.percentile): r.threshold for r in results}
        stats["min"] = results[0].valid_min
        stats["max"] = results[0].valid_max
        stats["count"] = results[0].valid_count
        return stats
