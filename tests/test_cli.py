"""Tests for CLI commands via Typer test runner."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

import xlsxjson
from xlsxjson.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["result"]["version"] == xlsxjson.__version__


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == xlsxjson.__version__


def test_read_envelope(people_workbook: Path):
    result = runner.invoke(app, ["read", "--file", str(people_workbook), "--range", "A1:B3"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert data["command"] == "read"
    assert data["result"]["sheet"] == "People"
    assert data["result"]["headers"] == ["Name", "Age"]
    assert data["result"]["records"] == [
        {"Name": "Ana", "Age": 30.0},
        {"Name": "", "Age": "31"},
    ]


def test_read_raw_prints_records_only(people_workbook: Path):
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "-r", "A1:B2", "--raw"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"Name": "Ana", "Age": 30.0}]


def test_read_no_headers_and_sheet_index(people_workbook: Path):
    result = runner.invoke(app, [
        "read", "-f", str(people_workbook),
        "--range", "A1:A1", "--sheet-index", "1", "--no-headers", "--raw",
    ])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"0": "second sheet"}]


def test_read_date_patterns(typed_workbook: Path):
    result = runner.invoke(app, [
        "read", "-f", str(typed_workbook), "--range", "C1:C2",
        "--date-header", "yyyy", "--date-body", "HH:mm", "--raw",
    ])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"2024": "08:30"}]


def test_read_writes_out_file(people_workbook: Path, tmp_path: Path):
    out = tmp_path / "records.json"
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "-r", "A1:B3", "--out", str(out)])
    assert result.exit_code == 0
    assert json.loads(out.read_text()) == json.loads(result.stdout)["result"]["records"]


def test_read_out_to_missing_directory(people_workbook: Path, tmp_path: Path):
    out = tmp_path / "missing" / "records.json"
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "-r", "A1:B3", "--out", str(out)])
    assert result.exit_code == 50
    data = json.loads(result.stdout)
    assert data["errors"][0]["code"] == "ERR_IO_WRITE"


def test_read_from_config(people_workbook: Path, tmp_path: Path):
    config = tmp_path / "props.yaml"
    config.write_text(f"path: {people_workbook}\nrange: A1:B3\nFormatoFechaBody: yyyy\n")
    result = runner.invoke(app, ["read", "--config", str(config), "--raw"])
    assert result.exit_code == 0
    assert len(json.loads(result.stdout)) == 2


def test_flags_override_config(people_workbook: Path, tmp_path: Path):
    config = tmp_path / "props.yaml"
    config.write_text(f"path: {people_workbook}\nrange: A1:B3\n")
    result = runner.invoke(app, ["read", "-c", str(config), "--range", "A1:B2", "--raw"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"Name": "Ana", "Age": 30.0}]


def test_read_missing_path():
    result = runner.invoke(app, ["read", "--range", "A1:B2"])
    assert result.exit_code == 10
    data = json.loads(result.stdout)
    assert data["ok"] is False
    assert data["errors"][0]["code"] == "ERR_INVALID_ARGUMENT"
    assert data["errors"][0]["details"]["issues"][0]["field"] == "path"


def test_read_bad_config(tmp_path: Path):
    config = tmp_path / "props.yaml"
    config.write_text("- just\n- a list\n")
    result = runner.invoke(app, ["read", "-c", str(config)])
    assert result.exit_code == 10
    assert json.loads(result.stdout)["errors"][0]["code"] == "ERR_CONFIG_INVALID"


def test_read_bad_range(people_workbook: Path):
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "--range", "A1B2"])
    assert result.exit_code == 10
    assert json.loads(result.stdout)["errors"][0]["code"] == "ERR_RANGE_INVALID"


def test_read_raw_failure_prints_envelope(people_workbook: Path):
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "-r", "A1:B2", "-s", "7", "--raw"])
    assert result.exit_code == 10
    data = json.loads(result.stdout)
    assert data["ok"] is False
    assert data["errors"][0]["code"] == "ERR_SHEET_NOT_FOUND"


def test_read_not_found(tmp_path: Path):
    result = runner.invoke(app, ["read", "-f", str(tmp_path / "nope.xlsx"), "-r", "A1:B2"])
    assert result.exit_code == 50
    assert json.loads(result.stdout)["errors"][0]["code"] == "ERR_WORKBOOK_NOT_FOUND"


def test_read_warnings_in_envelope(typed_workbook: Path):
    result = runner.invoke(app, ["read", "-f", str(typed_workbook), "-r", "A1:G2"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [w["code"] for w in data["warnings"]] == ["WARN_UNCACHED_FORMULA"]


def test_sheet_ls(people_workbook: Path):
    result = runner.invoke(app, ["sheet", "ls", "--file", str(people_workbook)])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert [(s["name"], s["index"]) for s in data["result"]] == [("People", 0), ("Notes", 1)]


def test_sheet_ls_not_found(tmp_path: Path):
    result = runner.invoke(app, ["sheet", "ls", "--file", str(tmp_path / "nope.xlsx")])
    assert result.exit_code == 50
    data = json.loads(result.stdout)
    assert data["errors"][0]["code"] == "ERR_WORKBOOK_NOT_FOUND"


def test_unknown_option_is_usage_error():
    result = runner.invoke(app, ["read", "--bogus"])
    assert result.exit_code == 10
    data = json.loads(result.stdout)
    assert data["errors"][0]["code"] == "ERR_USAGE"


def test_bad_option_value_is_usage_error(people_workbook: Path):
    result = runner.invoke(app, ["read", "-f", str(people_workbook), "--sheet-index", "first"])
    assert result.exit_code == 10
    data = json.loads(result.stdout)
    assert data["ok"] is False
    assert data["errors"][0]["code"] == "ERR_USAGE"


def test_config_aliases_with_flag_override(people_workbook: Path, tmp_path: Path):
    config = tmp_path / "props.yaml"
    config.write_text(f"path: {people_workbook}\nrange: A1:A1\nsheetIndex: 1\n")
    result = runner.invoke(app, ["read", "-c", str(config), "--sheet-index", "0", "--range", "A1:B2", "--raw"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"Name": "Ana", "Age": 30.0}]
