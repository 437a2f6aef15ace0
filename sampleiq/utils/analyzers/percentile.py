"""Percentile analyzer for tabular samples."""

import logging
from typing import Any

from sampleiq.configs import Config
from sampleiq.estimator import MIN_SAMPLE_SIZE, estimate_many
from sampleiq.schemas import AnalysisResult
from sampleiq.utils.analysis_utils import DataLoader, percentile_key
from sampleiq.utils.base import BaseAnalyzer
from sampleiq.utils.errors import InsufficientDataError

LOGGER = logging.getLogger(__name__)

ALL_ROWS_KEY = "all"


class PercentileAnalyzer(BaseAnalyzer):
    """Estimate percentiles of a CSV column, optionally per group."""

    def __init__(self, config: Config | None = None):
        """Initialize analyzer.

        Args:
            config: Optional configuration object ('estimator' section is used)
        """
        super().__init__("PercentileAnalyzer", config)

    def _group_metrics(self, values) -> dict[str, Any]:
        # Short groups are a data problem here, not a caller error
        if len(values) < MIN_SAMPLE_SIZE:
            raise InsufficientDataError(f"group has {len(values)} rows; at least {MIN_SAMPLE_SIZE} are required")
        # An unbounded range still drops blank (NaN) cells
        options = self.settings.with_unbounded_range().estimate_kwargs()
        results = estimate_many(values, self.settings.percentiles, **options)
        metrics: dict[str, Any] = {percentile_key(r.percentile): r.threshold for r in results}
        metrics["min"] = results[0].valid_min
        metrics["max"] = results[0].valid_max
        metrics["valid_count"] = results[0].valid_count
        metrics["num_samples"] = len(values)
        return metrics

    def analyze(self, csv_filepath: str, column: str = "value", group_by: str | None = None) -> AnalysisResult:
        """Analyze one column of a CSV file.

        Args:
            csv_filepath: Path to CSV file
            column: Column holding the sample values
            group_by: Optional column to split the sample by

        Returns:
            AnalysisResult with per-group percentile metrics; groups that are
            too small are listed under metrics['skipped']
        """
        df = DataLoader.load_csv(csv_filepath)
        DataLoader.validate_columns(df, [column] + ([group_by] if group_by else []))

        if group_by:
            groups = [(str(name), group_df) for name, group_df in df.groupby(group_by, sort=True)]
        else:
            groups = [(ALL_ROWS_KEY, df)]

        metrics: dict[str, Any] = {}
        skipped: list[str] = []
        for key, group_df in groups:
            values = DataLoader.column_values(group_df, column)
            try:
                metrics[key] = self._group_metrics(values)
            except InsufficientDataError as e:
                LOGGER.warning("Skipping group %s in %s: %s", key, csv_filepath, e)
                skipped.append(key)
        if skipped:
            metrics["skipped"] = skipped

        LOGGER.debug("Analyzed %d group(s) of column %s in %s", len(groups), column, csv_filepath)
        result = AnalysisResult(name="Percentile Analysis", metrics=metrics, raw_data=df)
        self.add_result(result)
        return result

    def summarize(self) -> dict[str, Any]:
        """Summarize all analysis results.

        Returns:
            Summary dictionary
        """
        summary = {
            "total_analyses": len(self.results),
            "groups_analyzed": set(),
            "groups_skipped": set(),
            "overall_min": float("inf"),
            "overall_max": float("-inf"),
        }

        for result in self.results:
            for key, metrics in result.metrics.items():
                if key == "skipped":
                    summary["groups_skipped"].update(metrics)
                    continue
                summary["groups_analyzed"].add(key)
                summary["overall_min"] = min(summary["overall_min"], metrics["min"])
                summary["overall_max"] = max(summary["overall_max"], metrics["max"])

        summary["groups_analyzed"] = sorted(summary["groups_analyzed"])
        summary["groups_skipped"] = sorted(summary["groups_skipped"])
        return summary


__all__ = ["PercentileAnalyzer"]
