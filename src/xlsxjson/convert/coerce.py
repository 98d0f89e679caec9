"""Cell coercion: TypedCell -> JSON-compatible value.

Two dispatch tables keyed by ``CellKind``, one for body cells and one for
header cells. Formula cells are evaluated first and the result goes through
the same table, so formula and plain cells coerce identically. Nothing here
raises: every kind ends in a concrete value (or, for headers, ``None`` to ask
the caller for its ordinal fallback key).
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Callable, Optional, Protocol, Union

from xlsxjson.contracts.cells import BLANK, CellKind, TypedCell
from xlsxjson.convert.dates import DatePattern

CoercedValue = Union[bool, float, str]


class FormulaEvaluator(Protocol):
    def evaluate(self, cell: TypedCell) -> TypedCell: ...


def number_text(value: float) -> str:
    """Render a number the way the JVM prints a double (``30.0``, ``1.0E7``)."""
    x = float(value)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == 0:
        return "-0.0" if math.copysign(1.0, x) < 0 else "0.0"
    if 1e-3 <= abs(x) < 1e7:
        return repr(x)
    d = Decimal(repr(x))
    sign, digits, _ = d.as_tuple()
    digits_str = "".join(map(str, digits)).rstrip("0") or "0"
    mantissa = digits_str[0] + "." + (digits_str[1:] or "0")
    return f"{'-' if sign else ''}{mantissa}E{d.adjusted()}"


def _body_numeric(cell: TypedCell, pattern: DatePattern) -> CoercedValue:
    if cell.is_date:
        return pattern.format(cell.value)
    return float(cell.value)


def _header_numeric(cell: TypedCell, pattern: DatePattern) -> Optional[str]:
    if cell.is_date:
        return pattern.format(cell.value)
    return number_text(cell.value)


def _empty(cell: TypedCell, pattern: DatePattern) -> CoercedValue:
    return ""


def _fallback(cell: TypedCell, pattern: DatePattern) -> Optional[str]:
    return None


_BODY: dict[CellKind, Callable[[TypedCell, DatePattern], CoercedValue]] = {
    CellKind.BOOLEAN: lambda cell, pattern: bool(cell.value),
    CellKind.NUMERIC: _body_numeric,
    CellKind.TEXT: lambda cell, pattern: str(cell.value),
    CellKind.BLANK: _empty,
    CellKind.ERROR: lambda cell, pattern: str(cell.value),
    CellKind.UNKNOWN: _empty,
}

_HEADER: dict[CellKind, Callable[[TypedCell, DatePattern], Optional[str]]] = {
    CellKind.BOOLEAN: lambda cell, pattern: "true" if cell.value else "false",
    CellKind.NUMERIC: _header_numeric,
    CellKind.TEXT: lambda cell, pattern: str(cell.value),
    CellKind.BLANK: _fallback,
    CellKind.ERROR: _fallback,
    CellKind.UNKNOWN: _fallback,
}


def _resolve(cell: TypedCell, evaluator: FormulaEvaluator | None) -> TypedCell:
    if cell.kind is not CellKind.FORMULA:
        return cell
    if evaluator is None:
        return BLANK
    return evaluator.evaluate(cell)


def coerce_body(
    cell: TypedCell,
    pattern: DatePattern,
    evaluator: FormulaEvaluator | None = None,
) -> CoercedValue:
    """Coerce a data cell. Blank, missing and unrecognized cells become ``""``."""
    resolved = _resolve(cell, evaluator)
    return _BODY.get(resolved.kind, _empty)(resolved, pattern)


def coerce_header(
    cell: TypedCell,
    pattern: DatePattern,
    evaluator: FormulaEvaluator | None = None,
) -> Optional[str]:
    """Coerce a header cell to a key, or None when the ordinal fallback applies."""
    resolved = _resolve(cell, evaluator)
    return _HEADER.get(resolved.kind, _fallback)(resolved, pattern)
