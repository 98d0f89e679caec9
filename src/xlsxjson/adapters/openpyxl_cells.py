"""openpyxl-based cell access: classification, read-only sheet view, formula results."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Callable

from openpyxl.cell.cell import Cell
from openpyxl.utils.datetime import from_excel
from openpyxl.worksheet.worksheet import Worksheet

from xlsxjson.contracts.cells import BLANK, CellKind, TypedCell

_DATE_TYPES = (datetime, date, time, timedelta)


def to_typed_cell(cell: Cell | None) -> TypedCell:
    """Classify an openpyxl cell. ``None`` (no cell stored) is BLANK."""
    if cell is None:
        return BLANK
    value = cell.value
    coords: dict[str, Any] = {"row": cell.row, "column": cell.column}

    if cell.data_type == "f":
        # ArrayFormula / DataTableFormula keep the formula in .text
        formula = getattr(value, "text", value)
        return TypedCell(kind=CellKind.FORMULA, value=formula, **coords)
    if value is None:
        return TypedCell(kind=CellKind.BLANK, **coords)
    if cell.data_type == "b" or isinstance(value, bool):
        return TypedCell(kind=CellKind.BOOLEAN, value=bool(value), **coords)
    if cell.data_type == "e":
        return TypedCell(kind=CellKind.ERROR, value=str(value), **coords)
    if isinstance(value, _DATE_TYPES):
        return TypedCell(kind=CellKind.NUMERIC, value=value, is_date=True, **coords)
    if isinstance(value, (int, float)):
        if cell.is_date:
            # number stored under a date format without conversion (in-memory workbooks)
            return TypedCell(kind=CellKind.NUMERIC, value=from_excel(value), is_date=True, **coords)
        return TypedCell(kind=CellKind.NUMERIC, value=value, **coords)
    if isinstance(value, str):
        return TypedCell(kind=CellKind.TEXT, value=value, **coords)
    return TypedCell(kind=CellKind.UNKNOWN, value=value, **coords)


class SheetView:
    """Read-only row/column access to a worksheet.

    ``Worksheet.cell()`` creates cells on access; this view only looks at the
    cells that were loaded from the file, so absent rows and cells stay absent.
    """

    def __init__(self, ws: Worksheet) -> None:
        self.ws = ws
        self._rows: dict[int, dict[int, Cell]] = {}
        for (row, col), cell in ws._cells.items():
            self._rows.setdefault(row, {})[col] = cell

    @property
    def title(self) -> str:
        return self.ws.title

    def row(self, row: int) -> dict[int, Cell] | None:
        """Cells of a 1-based row keyed by 1-based column, or None if the row is absent."""
        return self._rows.get(row)

    def cell(self, row: int, column: int) -> TypedCell:
        cells = self.row(row)
        if cells is None:
            return BLANK
        return to_typed_cell(cells.get(column))


class CachedFormulaEvaluator:
    """Resolves formula cells to the value cached in the workbook file.

    The cached-value sheet is loaded on the first evaluation and results are
    memoized per coordinate. Formulas without a cached value evaluate to
    BLANK and are listed in ``uncached``.
    """

    def __init__(self, load_values_sheet: Callable[[], Worksheet]) -> None:
        self._load_values_sheet = load_values_sheet
        self._values: SheetView | None = None
        self._results: dict[tuple[int, int], TypedCell] = {}
        self.uncached: list[str] = []

    def evaluate(self, cell: TypedCell) -> TypedCell:
        if cell.kind is not CellKind.FORMULA:
            return cell
        if cell.row is None or cell.column is None:
            return BLANK
        key = (cell.row, cell.column)
        if key not in self._results:
            if self._values is None:
                self._values = SheetView(self._load_values_sheet())
            result = self._values.cell(cell.row, cell.column)
            if result.kind is CellKind.BLANK:
                self.uncached.append(cell.coordinate or "")
            self._results[key] = result
        return self._results[key]
