"""Range expression parsing: ``A1:B10`` -> RangeSpec."""

from __future__ import annotations

import re

from openpyxl.utils import column_index_from_string

from xlsxjson.contracts.common import RangeFormatError
from xlsxjson.contracts.responses import RangeSpec

_NON_LETTERS = re.compile(r"[^A-Za-z]+")
_NON_DIGITS = re.compile(r"\D+")


def column_index(letters: str) -> int:
    """Convert column letters to a 0-based index (A=0, Z=25, AA=26)."""
    try:
        return column_index_from_string(letters.upper()) - 1
    except ValueError as e:
        raise RangeFormatError(f"Invalid column letters: '{letters}'") from e


def _parse_cell(token: str, ref: str) -> tuple[int, int]:
    letters = _NON_LETTERS.sub("", token)
    digits = _NON_DIGITS.sub("", token)
    if not letters:
        raise RangeFormatError(f"Missing column letters in '{token}' (range '{ref}')")
    if not digits:
        raise RangeFormatError(f"Missing row number in '{token}' (range '{ref}')")
    return column_index(letters), int(digits)


def parse_range(ref: str) -> RangeSpec:
    """Parse ``startCell:endCell`` into 0-based columns and 1-based rows.

    Anything that is not a letter is dropped when reading the column and
    anything that is not a digit is dropped when reading the row, so ``$A$1``
    parses like ``A1``. Start/end ordering is not validated.
    """
    parts = ref.split(":")
    if len(parts) != 2:
        raise RangeFormatError(f"Range must look like 'A1:B10', got '{ref}'")
    col_start, row_start = _parse_cell(parts[0], ref)
    col_end, row_end = _parse_cell(parts[1], ref)
    return RangeSpec(
        col_start=col_start,
        col_end=col_end,
        row_start=row_start,
        row_end=row_end,
    )
