"""Command-line interface for SampleIQ."""

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from typing import Any

from sampleiq import __version__
from sampleiq.configs import Config, ConfigManager, EstimatorSettings
from sampleiq.estimator import estimate_many
from sampleiq.schemas import ValidRange
from sampleiq.utils.analysis_utils import DataLoader, percentile_key
from sampleiq.utils.analyzers import PercentileAnalyzer
from sampleiq.utils.errors import ConfigError, InvalidArgumentError, SampleIQError

LOGGER = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """Setup command-line argument parser.

    Returns:
        ArgumentParser configured for SampleIQ
    """
    parser = argparse.ArgumentParser(
        prog="sampleiq",
        description="SampleIQ - percentile estimation with missing-value filtering",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Median of an inline sample
  sampleiq estimate --values 10,20,30,40 -q 0.5

  # Several percentiles of a CSV column, treating -99 sentinels as missing
  sampleiq estimate --csv data.csv --column latency_ms -q 0.5 -q 0.99 --valid-range 0 1000

  # Per-group percentiles
  sampleiq analyze --csv data.csv --column latency_ms --group-by workload

Environment Variables:
  SAMPLEIQ_CONFIG     Default config file path
        """,
    )
    parser.add_argument("--version", action="version", version=f"sampleiq {__version__}")
    parser.add_argument(
        "--config",
        default=os.environ.get("SAMPLEIQ_CONFIG"),
        help="Path to configuration file (YAML/JSON)",
    )
    parser.add_argument("--output", help="Output file for results (JSON)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    estimate_parser = subparsers.add_parser("estimate", help="Estimate percentiles of one sample")
    source = estimate_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--values", help="Comma-separated sample values")
    source.add_argument("--csv", help="CSV file holding the sample")
    estimate_parser.add_argument("--column", default="value", help="CSV column to read (default: value)")
    estimate_parser.add_argument(
        "--percentile",
        "-q",
        type=float,
        action="append",
        help="Fraction in [0, 1]; repeat for several (default: from config)",
    )
    estimate_parser.add_argument(
        "--valid-range",
        nargs=2,
        type=float,
        metavar=("LOWER", "UPPER"),
        help="Inclusive bounds; values outside are treated as missing",
    )
    estimate_parser.add_argument("--pre-sorted", action="store_true", help="Sample is already ascending")
    estimate_parser.add_argument("--high-precision", action="store_true", help="Use float64 arithmetic")
    estimate_parser.add_argument("--json", action="store_true", help="Print results as JSON")

    analyze_parser = subparsers.add_parser("analyze", help="Per-group percentile analysis of a CSV file")
    analyze_parser.add_argument("--csv", required=True, help="CSV file to analyze")
    analyze_parser.add_argument("--column", default="value", help="Column holding the sample values")
    analyze_parser.add_argument("--group-by", help="Column to group rows by")

    return parser


def _parse_values(raw: str) -> list[float]:
    values = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            values.append(float(token))
        except ValueError:
            raise InvalidArgumentError(f"Not a number: {token!r}")
    return values


def _load_config(path: str | None) -> Config:
    if path and not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    return ConfigManager.load_or_default(path)


def _save_json(path: str, payload: dict[str, Any]) -> None:
    """Save a command payload as indented JSON, creating parent directories."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, default=str)


def _estimator_settings(args, config: Config) -> EstimatorSettings:
    """Config settings with command-line flags applied on top."""
    settings = EstimatorSettings.from_config(config)
    overrides: dict[str, Any] = {}
    if args.percentile:
        overrides["percentiles"] = tuple(args.percentile)
    if args.valid_range:
        overrides["valid_range"] = ValidRange(*args.valid_range)
    if args.pre_sorted:
        overrides["pre_sorted"] = True
    if args.high_precision:
        overrides["high_precision"] = True
    settings = replace(settings, **overrides)
    # Blank CSV cells load as NaN and count as missing, as in analyze
    if args.csv is not None:
        settings = settings.with_unbounded_range()
    return settings


def run_estimate(args, config: Config) -> dict[str, Any]:
    """Estimate percentiles for --values or a CSV column."""
    settings = _estimator_settings(args, config)

    if args.values is not None:
        sample = _parse_values(args.values)
    else:
        sample = DataLoader.load_sample(args.csv, args.column)

    LOGGER.debug(
        "Estimating %s over %d values (valid_range=%s)", settings.percentiles, len(sample), settings.valid_range
    )
    results = estimate_many(sample, settings.percentiles, **settings.estimate_kwargs())
    payload = {
        "valid_count": results[0].valid_count,
        "valid_min": results[0].valid_min,
        "valid_max": results[0].valid_max,
        "percentiles": {percentile_key(r.percentile): r.threshold for r in results},
    }

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        print("\nPercentile Estimate")
        print("=" * 40)
        print(f"  Valid values: {payload['valid_count']}")
        print(f"  Min: {payload['valid_min']:g}")
        print(f"  Max: {payload['valid_max']:g}")
        for key, threshold in payload["percentiles"].items():
            print(f"  {key.upper()}: {threshold:g}")
    return payload


def run_analyze(args, config: Config) -> dict[str, Any]:
    """Run per-group percentile analysis."""
    analyzer = PercentileAnalyzer(config)
    result = analyzer.analyze(args.csv, column=args.column, group_by=args.group_by)

    print("\nPercentile Analysis")
    print("=" * 60)
    for key, metrics in result.metrics.items():
        if key == "skipped":
            continue
        print(f"\n{key}:")
        for name in (percentile_key(p) for p in analyzer.settings.percentiles):
            print(f"  {name.upper()}: {metrics[name]:g}")
        print(f"  Min/Max: {metrics['min']:g} / {metrics['max']:g}")
        print(f"  Valid: {metrics['valid_count']} of {metrics['num_samples']}")
    for key in result.metrics.get("skipped", []):
        print(f"\n{key}: skipped (insufficient data)")
    return result.to_dict()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = setup_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = _load_config(args.config)
        if args.command == "estimate":
            result = run_estimate(args, config)
        elif args.command == "analyze":
            result = run_analyze(args, config)
        else:
            parser.print_help()
            return 1
    except (SampleIQError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        _save_json(args.output, result)
        print(f"\n[OK] Results saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
