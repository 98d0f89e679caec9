"""Record assembly: one key -> value object per data row."""

from __future__ import annotations

from typing import Any

from xlsxjson.adapters.openpyxl_cells import SheetView, to_typed_cell
from xlsxjson.contracts.cells import BLANK
from xlsxjson.contracts.responses import RangeSpec
from xlsxjson.convert.coerce import CoercedValue, FormulaEvaluator, coerce_body
from xlsxjson.convert.dates import DatePattern


def assemble_records(
    view: SheetView,
    spec: RangeSpec,
    headers: list[str],
    *,
    pattern: DatePattern,
    evaluator: FormulaEvaluator | None = None,
) -> list[dict[str, Any]]:
    """Build one record per row in ``[row_start, row_end]``, in row order.

    Rows absent from the sheet still produce a record of empty strings.
    Duplicate header keys overwrite earlier values in the same record.
    """
    records: list[dict[str, CoercedValue]] = []
    for row in range(spec.row_start, spec.row_end + 1):
        cells = view.row(row)
        record: dict[str, CoercedValue] = {}
        for position, key in enumerate(headers):
            column = spec.col_start + position + 1
            cell = BLANK if cells is None else to_typed_cell(cells.get(column))
            record[key] = coerce_body(cell, pattern, evaluator)
        records.append(record)
    return records
