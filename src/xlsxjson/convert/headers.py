"""Header key generation for a range."""

from __future__ import annotations

from xlsxjson.adapters.openpyxl_cells import SheetView
from xlsxjson.contracts.responses import RangeSpec
from xlsxjson.convert.coerce import FormulaEvaluator, coerce_header
from xlsxjson.convert.dates import DatePattern


def ordinal_headers(spec: RangeSpec) -> list[str]:
    """``["0", "1", ...]`` by position within the range, not sheet column."""
    return [str(i) for i in range(spec.width)]


def build_headers(
    view: SheetView,
    spec: RangeSpec,
    *,
    headers: bool,
    pattern: DatePattern,
    evaluator: FormulaEvaluator | None = None,
) -> tuple[list[str], RangeSpec]:
    """Build the header keys and the range the data scan should cover.

    With ``headers`` the first row of the range supplies the keys and the
    returned range starts one row lower. A header cell that is missing,
    blank, an error or unrecognized gets its position as key; the position
    counter advances on every column, so a fallback key always equals the
    column's position.
    """
    if not headers:
        return ordinal_headers(spec), spec

    keys: list[str] = []
    for position in range(spec.width):
        cell = view.cell(spec.row_start, spec.col_start + position + 1)
        key = coerce_header(cell, pattern, evaluator)
        keys.append(str(position) if key is None else key)
    return keys, spec.model_copy(update={"row_start": spec.row_start + 1})
