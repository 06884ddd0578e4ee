"""Tests for the command-line runner."""

import importlib.util
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.exceptions import ConfigurationError, PointsApiError
from tests.factories import make_summary

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_points_summary.py"


@pytest.fixture
def runner():
    spec = importlib.util.spec_from_file_location("run_points_summary", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "points_config.yaml"
    path.write_text(
        "pagination:\n  strategy: count\n  page_size: 100\n"
        f"paths:\n  output_base: {tmp_path / 'output'}\n  reports_subdir: points_reports\n"
    )
    return path


def test_prints_summary(runner, config_file, monkeypatch, capsys):
    importer = MagicMock()
    importer.summarize_points.return_value = make_summary({"DINING": 250, "GAS": 750})
    monkeypatch.setattr(runner, "ScenePlusImporter", MagicMock(return_value=importer))

    runner.main(["--start-date", "2023-01-01", "--end-date", "2023-12-31", "--config", str(config_file)])

    importer.summarize_points.assert_called_once_with(date(2023, 1, 1), date(2023, 12, 31), strategy=None)
    out = capsys.readouterr().out
    assert "25.00%" in out
    assert "TOTAL" in out


def test_strategy_flag_and_saved_report(runner, config_file, tmp_path, monkeypatch, capsys):
    importer = MagicMock()
    importer.summarize_points.return_value = make_summary({"DINING": 100}, strategy="boundary")
    monkeypatch.setattr(runner, "ScenePlusImporter", MagicMock(return_value=importer))

    runner.main(["--start-date", "2023-01-01", "--strategy", "boundary",
                 "--config", str(config_file), "--save-report"])

    assert importer.summarize_points.call_args.kwargs["strategy"] == "boundary"
    assert list((tmp_path / "output" / "points_reports").glob("*.json"))
    assert "Report saved to:" in capsys.readouterr().out


def test_api_failure_exits_without_summary(runner, config_file, monkeypatch, capsys):
    importer = MagicMock()
    importer.summarize_points.side_effect = PointsApiError("failed request for page 2\n500\n", status=500)
    monkeypatch.setattr(runner, "ScenePlusImporter", MagicMock(return_value=importer))

    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--start-date", "2023-01-01", "--config", str(config_file)])

    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "request failed" in out
    assert "TOTAL" not in out


def test_missing_token_exits(runner, config_file, monkeypatch, capsys):
    monkeypatch.setattr(runner, "ScenePlusImporter", MagicMock(side_effect=ConfigurationError("Missing token")))

    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--start-date", "2023-01-01", "--config", str(config_file)])

    assert excinfo.value.code == 1
    assert "Configuration error" in capsys.readouterr().out


def test_invalid_date_flag(runner, config_file):
    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--start-date", "01/02/2023", "--config", str(config_file)])
    assert excinfo.value.code == 2


def test_inverted_dates_exit_before_any_request(runner, config_file, monkeypatch):
    importer_cls = MagicMock()
    monkeypatch.setattr(runner, "ScenePlusImporter", importer_cls)

    with pytest.raises(SystemExit) as excinfo:
        runner.main(["--start-date", "2023-06-01", "--end-date", "2023-01-01", "--config", str(config_file)])

    assert excinfo.value.code == 1
    importer_cls.assert_not_called()


def test_skipped_rows_point_to_run_log(runner, config_file, monkeypatch, capsys):
    importer = MagicMock()
    importer.log_file = "logs/sceneplus_20240101_000000.log"
    importer.summarize_points.return_value = make_summary({"DINING": 100}, transactions_skipped=3)
    monkeypatch.setattr(runner, "ScenePlusImporter", MagicMock(return_value=importer))

    runner.main(["--start-date", "2023-01-01", "--config", str(config_file)])

    assert "Warnings logged to: logs/sceneplus_20240101_000000.log" in capsys.readouterr().out
