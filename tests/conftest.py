"""Shared test fixtures."""

from __future__ import annotations

import re
import zipfile
from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook


def inject_cached_values(path: Path, cached: dict[str, str], sheet_xml: str = "xl/worksheets/sheet1.xml") -> None:
    """Store cached formula results in a saved workbook.

    openpyxl writes formulas without results; spreadsheet applications store
    the last computed value in the cell's ``<v>`` element. Rewrites each
    listed cell as ``<c r=..><f>..</f><v>cached</v></c>``, keeping its style.
    """
    with zipfile.ZipFile(path) as zin:
        entries = [(info, zin.read(info.filename)) for info in zin.infolist()]

    def _rewrite(xml: str, coord: str, value: str) -> str:
        pattern = re.compile(rf'<c r="{coord}"([^>]*?)(?:/>|>(.*?)</c>)', re.S)
        m = pattern.search(xml)
        assert m is not None, f"cell {coord} not found in {sheet_xml}"
        attrs = re.sub(r'\s+t="[^"]*"', "", m.group(1))
        formula = re.search(r"<f>(.*?)</f>", m.group(2) or "", re.S)
        assert formula is not None, f"cell {coord} has no formula"
        cell = f'<c r="{coord}"{attrs}><f>{formula.group(1)}</f><v>{value}</v></c>'
        return xml[: m.start()] + cell + xml[m.end():]

    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zout:
        for info, data in entries:
            if info.filename == sheet_xml:
                xml = data.decode("utf-8")
                for coord, value in cached.items():
                    xml = _rewrite(xml, coord, value)
                data = xml.encode("utf-8")
            zout.writestr(info, data)


@pytest.fixture()
def people_workbook(tmp_path: Path) -> Path:
    """Name/Age sheet with a blank name and an age stored as text."""
    wb = Workbook()
    ws = wb.active
    ws.title = "People"
    ws.append(["Name", "Age"])
    ws.append(["Ana", 30])
    ws["B3"] = "31"

    ws2 = wb.create_sheet("Notes")
    ws2["A1"] = "second sheet"

    path = tmp_path / "people.xlsx"
    wb.save(str(path))
    wb.close()
    return path


@pytest.fixture()
def typed_workbook(tmp_path: Path) -> Path:
    """One header row exercising every header fallback, one row of mixed data.

    Row 1: id | (blank) | 2024-03-01 | 2.5 | TRUE | #N/A | 10000000
    Row 2: 1  | x       | datetime   | FALSE | #DIV/0! | =A2*2 | (blank)
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Data"
    ws["A1"] = "id"
    ws["C1"] = datetime(2024, 3, 1)
    ws["D1"] = 2.5
    ws["E1"] = True
    ws["F1"] = "#N/A"
    ws["G1"] = 10000000

    ws["A2"] = 1
    ws["B2"] = "x"
    ws["C2"] = datetime(2023, 1, 15, 8, 30, 5, 123000)
    ws["D2"] = False
    ws["E2"] = "#DIV/0!"
    ws["F2"] = "=A2*2"

    path = tmp_path / "typed.xlsx"
    wb.save(str(path))
    wb.close()
    return path


@pytest.fixture()
def formula_workbook(tmp_path: Path) -> Path:
    """Formulas with cached results, as saved by a spreadsheet application.

    A1:C1 headers, row 2 plain values, row 3 formulas whose cached results
    are 42.5 (number), 44941 under a date format (2023-01-15) and 50 (number).
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Calc"
    ws.append(["Amount", "When", "Total"])
    ws.append([42.5, datetime(2023, 1, 15), 50])
    ws["A3"] = "=A2*1"
    ws["B3"] = "=DATE(2023,1,15)"
    ws["B3"].number_format = "yyyy-mm-dd"
    ws["C3"] = "=SUM(C2:C2)"

    path = tmp_path / "formulas.xlsx"
    wb.save(str(path))
    wb.close()
    inject_cached_values(path, {"A3": "42.5", "B3": "44941", "C3": "50"})
    return path
