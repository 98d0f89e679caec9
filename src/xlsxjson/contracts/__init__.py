"""Pydantic models for options, cells, responses, and errors."""

from xlsxjson.contracts.cells import BLANK, CellKind, TypedCell
from xlsxjson.contracts.common import (
    ErrorDetail,
    Metrics,
    RangeFormatError,
    ReadError,
    ResponseEnvelope,
    SheetIndexError,
    Target,
    WarningDetail,
    WorkbookCorruptError,
    WorkbookIOError,
    WorkbookNotFoundError,
)
from xlsxjson.contracts.options import ReadOptions
from xlsxjson.contracts.responses import RangeSpec, ReadResult, SheetMeta

__all__ = [
    "BLANK",
    "CellKind",
    "ErrorDetail",
    "Metrics",
    "RangeFormatError",
    "RangeSpec",
    "ReadError",
    "ReadOptions",
    "ReadResult",
    "ResponseEnvelope",
    "SheetIndexError",
    "SheetMeta",
    "Target",
    "TypedCell",
    "WarningDetail",
    "WorkbookCorruptError",
    "WorkbookIOError",
    "WorkbookNotFoundError",
]
