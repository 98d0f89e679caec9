"""Range reader: one workbook range -> ordered list of records."""

from __future__ import annotations

from collections import Counter
from typing import Any

from xlsxjson.adapters.openpyxl_cells import CachedFormulaEvaluator, SheetView
from xlsxjson.contracts.common import ReadError, ResponseEnvelope, Target, WarningDetail
from xlsxjson.contracts.options import (
    DEFAULT_DATE_BODY,
    DEFAULT_DATE_HEADER,
    DEFAULT_RANGE,
    ReadOptions,
)
from xlsxjson.contracts.responses import ReadResult
from xlsxjson.convert.dates import DatePattern
from xlsxjson.convert.headers import build_headers
from xlsxjson.convert.ranges import parse_range
from xlsxjson.convert.records import assemble_records
from xlsxjson.engine.config import build_options
from xlsxjson.engine.context import WorkbookContext
from xlsxjson.engine.dispatcher import dumps_json, error_envelope, success_envelope
from xlsxjson.observe.events import EventEmitter, Timer


def convert(
    options: ReadOptions,
    *,
    emitter: EventEmitter | None = None,
) -> tuple[ReadResult, list[WarningDetail]]:
    """Run one conversion. Raises a ``ReadError`` subclass on failure."""
    emitter = emitter or EventEmitter()
    spec = parse_range(options.range)
    header_pattern = DatePattern.compile(options.format_date_header)
    body_pattern = DatePattern.compile(options.format_date_body)

    with WorkbookContext(options.path) as ctx:
        ws = ctx.sheet_at(options.sheet_index)
        view = SheetView(ws)
        evaluator = CachedFormulaEvaluator(lambda: ctx.values_sheet_at(options.sheet_index))

        headers, data_spec = build_headers(
            view, spec,
            headers=options.headers,
            pattern=header_pattern,
            evaluator=evaluator,
        )
        emitter.emit("read.headers", {"sheet": view.title, "headers": headers})

        records = assemble_records(
            view, data_spec, headers,
            pattern=body_pattern,
            evaluator=evaluator,
        )
        result = ReadResult(
            sheet=view.title,
            range=spec,
            headers=headers,
            records=records,
            row_count=len(records),
            fingerprint=ctx.fp,
        )

    warnings: list[WarningDetail] = []
    duplicates = sorted(k for k, n in Counter(headers).items() if n > 1)
    if duplicates:
        warnings.append(WarningDetail(
            code="WARN_DUPLICATE_HEADER",
            message=(
                f"Header keys appear more than once: {', '.join(duplicates)}. "
                "Later columns overwrite earlier ones in each record."
            ),
        ))
    if evaluator.uncached:
        warnings.append(WarningDetail(
            code="WARN_UNCACHED_FORMULA",
            message=(
                f"{len(evaluator.uncached)} formula cell(s) have no cached value and were read as blank: "
                f"{', '.join(evaluator.uncached[:10])}. Recalculate and save the workbook in a "
                "spreadsheet application to store results."
            ),
        ))
    return result, warnings


def read_range(
    path: str,
    range: str = DEFAULT_RANGE,
    sheet_index: int = 0,
    headers: bool = True,
    format_date_header: str = DEFAULT_DATE_HEADER,
    format_date_body: str = DEFAULT_DATE_BODY,
) -> list[dict[str, Any]]:
    """Read a range into a list of records.

    Raises ``OptionsError`` for invalid parameters and a ``ReadError``
    subclass when the range, file or sheet cannot be read.
    """
    options = build_options(
        path=path,
        range=range,
        sheet_index=sheet_index,
        headers=headers,
        format_date_header=format_date_header,
        format_date_body=format_date_body,
    )
    result, _ = convert(options)
    return result.records


def to_json(records: list[dict[str, Any]]) -> str:
    """Serialize records as a pretty-printed JSON array."""
    return dumps_json(records)


def run_read(
    options: ReadOptions,
    *,
    emitter: EventEmitter | None = None,
    command: str = "read",
) -> ResponseEnvelope:
    """Run a conversion and wrap the outcome in a response envelope.

    A failure is an ``ok=False`` envelope carrying the error code; a valid
    range with no data rows is ``ok=True`` with an empty ``records`` list.
    """
    emitter = emitter or EventEmitter()
    target = Target(file=options.path, sheet_index=options.sheet_index, ref=options.range)
    emitter.emit("read.start", options.model_dump())

    error: ReadError | None = None
    with Timer() as t:
        try:
            result, warnings = convert(options, emitter=emitter)
        except ReadError as e:
            error = e

    if error is not None:
        emitter.emit("read.error", {"code": error.code, "message": str(error)})
        return error_envelope(command, error.code, str(error), target=target, duration_ms=t.elapsed_ms)

    emitter.emit("read.complete", {"row_count": result.row_count, "duration_ms": t.elapsed_ms})
    return success_envelope(
        command,
        result.model_dump(mode="json"),
        target=target,
        warnings=warnings,
        duration_ms=t.elapsed_ms,
    )
