"""Common Pydantic models and error types: response envelope, errors, warnings, metrics."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ReadError(Exception):
    """Base class for failures that abort a range conversion."""

    code = "ERR_INTERNAL"


class RangeFormatError(ReadError, ValueError):
    """Raised when a range expression cannot be parsed into coordinates."""

    code = "ERR_RANGE_INVALID"


class SheetIndexError(ReadError, IndexError):
    """Raised when the requested sheet index does not exist."""

    code = "ERR_SHEET_NOT_FOUND"


class WorkbookNotFoundError(ReadError, FileNotFoundError):
    """Raised when the workbook path does not exist."""

    code = "ERR_WORKBOOK_NOT_FOUND"


class WorkbookIOError(ReadError, OSError):
    """Raised when the workbook exists but cannot be read (permissions, directory, ...)."""

    code = "ERR_IO_READ"


class WorkbookCorruptError(ReadError):
    """Raised when a workbook file cannot be parsed."""

    code = "ERR_WORKBOOK_CORRUPT"


class Target(BaseModel):
    """Identifies the target workbook/sheet/range for a command."""

    file: str | None = None
    sheet_index: int | None = None
    ref: str | None = None


class WarningDetail(BaseModel):
    """Structured warning."""

    code: str
    message: str
    path: str | None = None


class ErrorDetail(BaseModel):
    """Structured error."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class Metrics(BaseModel):
    """Execution metrics."""

    duration_ms: int = 0


class ResponseEnvelope(BaseModel):
    """Standard response envelope returned by every command."""

    ok: bool = True
    command: str = ""
    target: Target = Field(default_factory=Target)
    result: Any = None
    warnings: list[WarningDetail] = Field(default_factory=list)
    errors: list[ErrorDetail] = Field(default_factory=list)
    metrics: Metrics = Field(default_factory=Metrics)
