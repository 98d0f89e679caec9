"""Response envelopes, JSON output and exit codes."""

from __future__ import annotations

import sys
from typing import Any

import click
import orjson

from xlsxjson.contracts.common import (
    ErrorDetail,
    Metrics,
    ResponseEnvelope,
    Target,
    WarningDetail,
)

# Exit code per error class
EXIT_CODES = {
    "success": 0,
    "validation": 10,
    "io": 50,
    "internal": 90,
}

# Caller mistakes: bad range, bad sheet index, bad options, bad invocation.
VALIDATION_CODE_MARKERS = (
    "RANGE",
    "SHEET_NOT_FOUND",
    "INVALID_ARGUMENT",
    "CONFIG_INVALID",
    "MISSING_",
    "USAGE",
)

# Workbook or output file could not be read, parsed or written.
IO_CODE_MARKERS = (
    "WORKBOOK_NOT_FOUND",
    "WORKBOOK_CORRUPT",
)


def error_class(code: str) -> str:
    """Map an ``ERR_*`` code to ``validation``, ``io`` or ``internal``."""
    code = code.upper()
    if any(marker in code for marker in VALIDATION_CODE_MARKERS):
        return "validation"
    if code.startswith("ERR_IO") or any(marker in code for marker in IO_CODE_MARKERS):
        return "io"
    return "internal"


def success_envelope(
    command: str,
    result: Any,
    *,
    target: Target | None = None,
    warnings: list[WarningDetail] | None = None,
    duration_ms: int = 0,
) -> ResponseEnvelope:
    return ResponseEnvelope(
        ok=True,
        command=command,
        target=target or Target(),
        result=result,
        warnings=warnings or [],
        metrics=Metrics(duration_ms=duration_ms),
    )


def error_envelope(
    command: str,
    code: str,
    message: str,
    *,
    target: Target | None = None,
    details: dict | None = None,
    duration_ms: int = 0,
) -> ResponseEnvelope:
    return ResponseEnvelope(
        ok=False,
        command=command,
        target=target or Target(),
        errors=[ErrorDetail(code=code, message=message, details=details)],
        metrics=Metrics(duration_ms=duration_ms),
    )


def dumps_json(data: Any) -> str:
    """Indented JSON (two spaces), keys in insertion order."""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode()


def output_json(envelope: ResponseEnvelope) -> str:
    return dumps_json(envelope.model_dump(mode="json"))


def print_response(envelope: ResponseEnvelope) -> None:
    sys.stdout.write(output_json(envelope) + "\n")


def exit_code_for(envelope: ResponseEnvelope) -> int:
    """Process exit code for an envelope; the first error decides."""
    if envelope.ok:
        return EXIT_CODES["success"]
    if not envelope.errors:
        return EXIT_CODES["internal"]
    return EXIT_CODES[error_class(envelope.errors[0].code)]


def patch_typer_errors() -> None:
    """Report click usage errors (unknown option, bad value) as ``ERR_USAGE`` envelopes."""
    import typer.core

    invoke = typer.core.TyperGroup.invoke
    # Newer typer releases raise errors from their bundled copy of click.
    bundled = getattr(typer.core, "_click", click)
    usage_errors = tuple({click.exceptions.UsageError, bundled.exceptions.UsageError})

    def _invoke_with_envelope(self, ctx):
        try:
            return invoke(self, ctx)
        except usage_errors as e:
            env = error_envelope(ctx.info_name or "unknown", "ERR_USAGE", e.format_message())
            print_response(env)
            raise SystemExit(exit_code_for(env)) from e

    typer.core.TyperGroup.invoke = _invoke_with_envelope
