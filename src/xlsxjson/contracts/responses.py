"""Command-specific result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RangeSpec(BaseModel):
    """Parsed range coordinates.

    Columns are 0-based indexes, rows are 1-based and inclusive. Ordering of
    start/end is not checked.
    """

    col_start: int
    col_end: int
    row_start: int
    row_end: int

    @property
    def width(self) -> int:
        return self.col_end - self.col_start + 1


class SheetMeta(BaseModel):
    """Metadata for a single worksheet."""

    name: str
    index: int
    visible: str = "visible"  # visible / hidden / veryHidden
    used_range: str | None = None


class ReadResult(BaseModel):
    """Result of a ``read`` command."""

    sheet: str
    range: RangeSpec
    headers: list[str] = Field(default_factory=list)
    records: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0
    fingerprint: str = ""
