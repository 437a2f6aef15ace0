"""Tests for the sampleiq command-line interface."""

import json

import pytest

import sampleiq.cli as sampleiq_cli


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv("SAMPLEIQ_CONFIG", raising=False)


def test_version_flag_prints_and_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    """`sampleiq --version` should print version and exit with code 0."""
    parser = sampleiq_cli.setup_parser()
    with pytest.raises(SystemExit) as exc:
        parser.parse_args(["--version"])
    assert exc.value.code == 0
    assert "sampleiq" in capsys.readouterr().out.lower()


def test_no_command_prints_help(capsys):
    assert sampleiq_cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


class TestEstimateCommand:
    """`sampleiq estimate`."""

    def test_inline_values_json(self, capsys):
        code = sampleiq_cli.main(["estimate", "--values", "10,20,30,40", "-q", "0.5", "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["percentiles"] == {"p50": 25.0}
        assert payload["valid_count"] == 4

    def test_valid_range_filters_sentinels(self, capsys):
        code = sampleiq_cli.main(
            ["estimate", "--values", "1,7,3,-99,4,5,-99,9,6,2,8", "--valid-range", "0", "100", "-q", "0.5", "--json"]
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["percentiles"]["p50"] == 5.0
        assert payload["valid_count"] == 9
        assert payload["valid_min"] == 1.0

    def test_text_output_uses_config_percentiles(self, capsys):
        code = sampleiq_cli.main(["estimate", "--values", "10,20,30,40"])
        assert code == 0
        out = capsys.readouterr().out
        assert "P50: 25" in out
        assert "P95: 40" in out
        assert "Valid values: 4" in out

    def test_config_supplies_range(self, capsys, range_config_file):
        code = sampleiq_cli.main(
            ["--config", range_config_file, "estimate", "--values", "1,7,3,-99,4,5,-99,9,6,2,8", "--json"]
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["percentiles"] == {"p50": 5.0}

    def test_csv_column(self, capsys, temp_csv_file):
        code = sampleiq_cli.main(
            ["estimate", "--csv", temp_csv_file, "--column", "latency_ms", "--valid-range", "0", "1000", "-q", "1.0", "--json"]
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid_count"] == 9
        assert payload["percentiles"]["p100"] == 40.0

    def test_csv_blank_cells_without_range(self, capsys, temp_csv_file):
        """Blank cells count as missing even when no range is given."""
        code = sampleiq_cli.main(
            ["estimate", "--csv", temp_csv_file, "--column", "latency_ms", "-q", "1.0", "--json"]
        )
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid_count"] == 10
        assert payload["valid_min"] == -99.0
        assert payload["percentiles"]["p100"] == 40.0

    def test_inline_nan_without_range_fails(self, capsys):
        assert sampleiq_cli.main(["estimate", "--values", "1,nan,3,4"]) == 1
        assert "NaN" in capsys.readouterr().err

    def test_too_few_values_fails(self, capsys):
        assert sampleiq_cli.main(["estimate", "--values", "1,2"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_percentile_fails(self, capsys):
        assert sampleiq_cli.main(["estimate", "--values", "1,2,3", "-q", "1.5"]) == 1
        assert "percentile" in capsys.readouterr().err

    def test_non_numeric_value_fails(self, capsys):
        assert sampleiq_cli.main(["estimate", "--values", "1,x,3"]) == 1
        assert "Not a number" in capsys.readouterr().err

    def test_missing_config_file_fails(self, capsys):
        assert sampleiq_cli.main(["--config", "/nonexistent/c.yaml", "estimate", "--values", "1,2,3"]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_output_file(self, tmp_path, capsys):
        out = tmp_path / "out" / "result.json"
        code = sampleiq_cli.main(["--output", str(out), "estimate", "--values", "3,1,2", "-q", "0.5"])
        assert code == 0
        assert json.loads(out.read_text())["percentiles"]["p50"] == 2.0


class TestAnalyzeCommand:
    """`sampleiq analyze`."""

    def test_grouped_analysis(self, capsys, temp_csv_file):
        code = sampleiq_cli.main(["analyze", "--csv", temp_csv_file, "--column", "latency_ms", "--group-by", "workload"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Percentile Analysis" in out
        assert "a:" in out
        assert "P50: 25" in out

    def test_skipped_groups_reported(self, capsys, temp_csv_file, range_config_file, tmp_path):
        out_path = tmp_path / "analysis.json"
        code = sampleiq_cli.main(
            [
                "--config",
                range_config_file,
                "--output",
                str(out_path),
                "analyze",
                "--csv",
                temp_csv_file,
                "--column",
                "latency_ms",
                "--group-by",
                "workload",
            ]
        )
        assert code == 0
        assert "b: skipped" in capsys.readouterr().out
        saved = json.loads(out_path.read_text())
        assert saved["name"] == "Percentile Analysis"
        assert saved["metrics"]["skipped"] == ["b"]

    def test_missing_csv(self, capsys):
        assert sampleiq_cli.main(["analyze", "--csv", "/nonexistent.csv", "--column", "v"]) == 1
        assert "File not found" in capsys.readouterr().err
