"""Tests for the JSON-lines stdio server."""

from __future__ import annotations

import io
import json
from pathlib import Path

from xlsxjson.server.stdio import StdioServer


def _serve(*lines: str) -> list[dict]:
    stdout = io.StringIO()
    StdioServer().run(stdin=io.StringIO("\n".join(lines) + "\n"), stdout=stdout)
    return [json.loads(line) for line in stdout.getvalue().splitlines()]


def test_read_request(people_workbook: Path):
    request = {"id": "r1", "command": "read", "args": {"path": str(people_workbook), "range": "A1:B3"}}
    (response,) = _serve(json.dumps(request))
    assert response["id"] == "r1"
    assert response["ok"] is True
    assert response["result"]["records"] == [
        {"Name": "Ana", "Age": 30.0},
        {"Name": "", "Age": "31"},
    ]


def test_read_request_with_processor_property_names(people_workbook: Path):
    args = {
        "path": str(people_workbook),
        "range": "A1:B2",
        "sheet_index": 0,
        "headers": False,
        "FormatoFechaHeader": "yyyy",
        "FormatoFechaBody": "yyyy",
    }
    (response,) = _serve(json.dumps({"id": 2, "command": "read", "args": args}))
    assert response["ok"] is True
    assert response["result"]["headers"] == ["0", "1"]


def test_requests_are_independent(people_workbook: Path, tmp_path: Path):
    good = {"id": "a", "command": "read", "args": {"path": str(people_workbook), "range": "A1:B2"}}
    bad = {"id": "b", "command": "read", "args": {"path": str(tmp_path / "nope.xlsx"), "range": "A1:B2"}}
    responses = _serve(json.dumps(good), json.dumps(bad), json.dumps(good))
    assert [r["ok"] for r in responses] == [True, False, True]
    assert responses[1]["errors"][0]["code"] == "ERR_WORKBOOK_NOT_FOUND"
    assert responses[0]["result"]["records"] == responses[2]["result"]["records"]


def test_invalid_options(people_workbook: Path):
    request = {"id": "x", "command": "read", "args": {"path": str(people_workbook), "unknown": 1}}
    (response,) = _serve(json.dumps(request))
    assert response["ok"] is False
    assert response["errors"][0]["code"] == "ERR_INVALID_ARGUMENT"


def test_sheet_ls(people_workbook: Path):
    (response,) = _serve(json.dumps({"id": 1, "command": "sheet.ls", "args": {"path": str(people_workbook)}}))
    assert [s["name"] for s in response["result"]] == ["People", "Notes"]


def test_sheet_ls_missing_path():
    (response,) = _serve(json.dumps({"id": 1, "command": "sheet.ls"}))
    assert response["errors"][0]["code"] == "ERR_MISSING_PARAM"


def test_unknown_command():
    (response,) = _serve(json.dumps({"id": 9, "command": "write"}))
    assert response["id"] == 9
    assert response["errors"][0]["code"] == "ERR_USAGE"


def test_args_must_be_object():
    (response,) = _serve(json.dumps({"id": 1, "command": "read", "args": [1, 2]}))
    assert response["errors"][0]["code"] == "ERR_INVALID_ARGUMENT"


def test_malformed_lines_and_blank_lines():
    responses = _serve("not json", "", "   ", "[1, 2]")
    assert len(responses) == 2
    assert all(r["errors"][0]["code"] == "ERR_USAGE" for r in responses)
    assert "Invalid JSON" in responses[0]["errors"][0]["message"]


def test_read_request_mixing_property_spellings(people_workbook: Path):
    args = {"path": str(people_workbook), "range": "A1:B2", "sheetIndex": 1, "sheet_index": 0}
    (response,) = _serve(json.dumps({"id": 3, "command": "read", "args": args}))
    assert response["ok"] is True
    assert response["result"]["sheet"] == "People"
