"""Typed cell model shared by the cell adapter and the coercion tables."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class CellKind(str, Enum):
    """Closed set of cell kinds a workbook cell can be classified as."""

    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    TEXT = "text"
    FORMULA = "formula"
    BLANK = "blank"
    ERROR = "error"
    UNKNOWN = "unknown"


class TypedCell(BaseModel):
    """A single cell value tagged with its kind.

    ``is_date`` is only meaningful for NUMERIC cells; ``value`` then holds a
    ``datetime``/``date``/``time``/``timedelta``. FORMULA cells carry the
    formula text and need ``row``/``column`` (1-based) to be evaluated.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: CellKind
    value: Any = None
    is_date: bool = False
    row: int | None = None
    column: int | None = None

    @property
    def coordinate(self) -> str | None:
        if self.row is None or self.column is None:
            return None
        from openpyxl.utils import get_column_letter

        return f"{get_column_letter(self.column)}{self.row}"


BLANK = TypedCell(kind=CellKind.BLANK)
