"""Smoke tests for the kub-timeline CLI."""

import json

import pytest
from click.testing import CliRunner

from kub_timeline.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("show_point_events: true\n")
    return str(path)


@pytest.fixture
def intervals_file(tmp_path):
    path = tmp_path / "intervals.json"
    path.write_text(
        json.dumps(
            [
                {"locator": "ns/b pod/p2 uid/u2", "message": "constructed", "from": "2024-05-01T12:00:30Z"},
                {"locator": "ns/a pod/p1 uid/u1", "message": "constructed", "from": "2024-05-01T12:00:20Z"},
                {"locator": "ns/a pod/p1", "message": "reason/Ready ready", "from": "2024-05-01T12:00:10Z"},
            ]
        )
    )
    return str(path)


@pytest.fixture
def percentiles_file(tmp_path):
    path = tmp_path / "percentiles.yaml"
    path.write_text(
        "- alert_name: KubePodNotReady\n"
        "  platform: aws\n"
        "  p95: 10\n"
        "  p99: 20\n"
        "  job_runs: 150\n"
    )
    return str(path)


class TestTimelineCommand:
    def test_json_output_is_ordered(self, runner, config_file, intervals_file):
        result = runner.invoke(main, ["--config", config_file, "timeline", intervals_file, "--json"])
        assert result.exit_code == 0, result.output
        items = json.loads(result.output)["items"]
        assert [i["locator"] for i in items] == [
            "ns/a pod/p1 uid/u1",
            "ns/b pod/p2 uid/u2",
            "ns/a pod/p1",
        ]

    def test_filters(self, runner, config_file, intervals_file):
        result = runner.invoke(
            main,
            ["--config", config_file, "timeline", intervals_file, "--json", "-n", "a", "-r", "Ready"],
        )
        assert result.exit_code == 0, result.output
        items = json.loads(result.output)["items"]
        assert [i["message"] for i in items] == ["reason/Ready ready"]

    def test_table_output(self, runner, config_file, intervals_file):
        result = runner.invoke(main, ["--config", config_file, "timeline", intervals_file])
        assert result.exit_code == 0, result.output
        assert "Event Timeline" in result.output
        assert "3 of 3 intervals shown" in result.output

    def test_invalid_document(self, runner, config_file, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('[{"locator": "x"}]')
        result = runner.invoke(main, ["--config", config_file, "timeline", str(bad)])
        assert result.exit_code == 1
        assert "Invalid interval document" in result.output


class TestDecodeCommand:
    def test_decode_container(self, runner, config_file):
        result = runner.invoke(
            main, ["--config", config_file, "decode", "ns/a pod/p uid/u container/c"]
        )
        assert result.exit_code == 0, result.output
        assert "Container" in result.output

    def test_decode_incomplete(self, runner, config_file):
        result = runner.invoke(main, ["--config", config_file, "decode", "ns/a pod/p"])
        assert result.exit_code == 0
        assert "incomplete" in result.output


class TestAllowanceCommand:
    def test_thresholds_and_decision(self, runner, config_file, percentiles_file):
        result = runner.invoke(
            main,
            [
                "--config", config_file,
                "allowance", "KubePodNotReady",
                "--platform", "aws",
                "--data", percentiles_file,
                "--observed", "15",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "FLAKE" in result.output

    def test_never_fail(self, runner, config_file, percentiles_file):
        result = runner.invoke(
            main,
            [
                "--config", config_file,
                "allowance", "KubePodNotReady",
                "--platform", "aws",
                "--data", percentiles_file,
                "--never-fail",
                "--observed", "60",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "FLAKE" in result.output
        assert "24h00m00s" in result.output

    def test_unknown_alert_fails(self, runner, config_file, percentiles_file):
        result = runner.invoke(
            main,
            ["--config", config_file, "allowance", "Unknown", "--data", percentiles_file],
        )
        assert result.exit_code == 1
        assert "Cannot determine allowance" in result.output

    def test_malformed_data(self, runner, config_file, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("- 5\n")
        result = runner.invoke(
            main, ["--config", config_file, "allowance", "KubePodNotReady", "--data", str(bad)]
        )
        assert result.exit_code == 1
        assert "Cannot determine allowance" in result.output

    def test_no_data_configured(self, runner, config_file, monkeypatch):
        monkeypatch.delenv("KUB_TIMELINE_HISTORICAL_DATA", raising=False)
        result = runner.invoke(main, ["--config", config_file, "allowance", "KubePodNotReady"])
        assert result.exit_code == 1
        assert "No historical data configured" in result.output


class TestInitCommand:
    def test_writes_sample(self, runner, config_file):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["--config", config_file, "init"])
            assert result.exit_code == 0
            with open(".kub-timeline.yaml") as f:
                assert "never_fail_alerts" in f.read()
