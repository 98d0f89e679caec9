"""WorkbookContext: loads a workbook, provides sheets, metadata and fingerprint."""

from __future__ import annotations

from pathlib import Path

import openpyxl
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from xlsxjson.contracts.common import (
    SheetIndexError,
    WorkbookCorruptError,
    WorkbookIOError,
    WorkbookNotFoundError,
)
from xlsxjson.contracts.responses import SheetMeta
from xlsxjson.io.fileops import fingerprint


class WorkbookContext:
    """Wraps an openpyxl workbook for one read.

    Formula cells are loaded as formulas. The cached-value copy of the
    workbook (``data_only=True``) is only loaded when a formula has to be
    evaluated. Use as a context manager so both are closed on every exit
    path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).resolve()
        if not self.path.exists():
            raise WorkbookNotFoundError(f"Workbook not found: {self.path}")
        if not self.path.is_file():
            raise WorkbookIOError(f"Not a file: {self.path}")
        try:
            self.fp = fingerprint(self.path)
        except OSError as e:
            raise WorkbookIOError(f"Cannot read workbook {self.path}: {e}") from e
        self.wb: Workbook = self._load(data_only=False)
        self._values_wb: Workbook | None = None

    def _load(self, *, data_only: bool) -> Workbook:
        try:
            return openpyxl.load_workbook(str(self.path), data_only=data_only)
        except OSError as e:
            raise WorkbookIOError(f"Cannot read workbook {self.path}: {e}") from e
        except Exception as e:
            raise WorkbookCorruptError(f"Cannot open workbook {self.path}: {e}") from e

    def __enter__(self) -> "WorkbookContext":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    def sheet_at(self, index: int) -> Worksheet:
        """Return the worksheet at a zero-based index."""
        sheets = self.wb.worksheets
        if index < 0 or index >= len(sheets):
            raise SheetIndexError(
                f"Sheet index {index} out of range: workbook has {len(sheets)} worksheet(s)"
            )
        return sheets[index]

    def values_sheet_at(self, index: int) -> Worksheet:
        """Return the worksheet at ``index`` with cached formula results as values."""
        if self._values_wb is None:
            self._values_wb = self._load(data_only=True)
        return self._values_wb.worksheets[index]

    def list_sheets(self) -> list[SheetMeta]:
        sheets: list[SheetMeta] = []
        for idx, ws in enumerate(self.wb.worksheets):
            vis = "visible"
            if ws.sheet_state == "hidden":
                vis = "hidden"
            elif ws.sheet_state == "veryHidden":
                vis = "veryHidden"
            used = ws.dimensions if ws.dimensions else None
            sheets.append(SheetMeta(name=ws.title, index=idx, visible=vis, used_range=used))
        return sheets

    def close(self) -> None:
        self.wb.close()
        if self._values_wb is not None:
            self._values_wb.close()
            self._values_wb = None
