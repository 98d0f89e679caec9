"""Typer CLI application: top-level commands and subcommand groups."""

from __future__ import annotations

import sys
from typing import Annotated, Optional

import typer

from xlsxjson.engine.dispatcher import patch_typer_errors

patch_typer_errors()

import xlsxjson
from xlsxjson.contracts.common import ReadError, Target
from xlsxjson.engine.config import ConfigError, build_options, load_properties
from xlsxjson.engine.dispatcher import (
    error_envelope,
    exit_code_for,
    print_response,
    success_envelope,
)
from xlsxjson.observe.events import EventEmitter, Timer

# ---------------------------------------------------------------------------
# App & subcommand groups
# ---------------------------------------------------------------------------

_MAIN_HELP = """\
Read a rectangular cell range from an Excel workbook (.xlsx/.xlsm) as JSON records.

**Typical use:**

1. `xlsxjson sheet ls -f data.xlsx`: find the sheet index
2. `xlsxjson read -f data.xlsx --range A1:D20`: first row of the range becomes the keys
3. `xlsxjson read -f data.xlsx --range A2:D20 --no-headers --raw`: keys "0", "1", ...; bare JSON array

**Every command** returns a JSON `ResponseEnvelope`:
`{"ok": bool, "command": "...", "result": {...}, "errors": [...], "warnings": [...], "metrics": {"duration_ms": N}}`

**Exit codes:** 0=success, 10=validation, 50=io, 90=internal
"""

_SHEET_EPILOG = """\
**Examples:**

`xlsxjson sheet ls -f data.xlsx`: list worksheets with their zero-based index

Use the index with `xlsxjson read --sheet-index`.
"""


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(xlsxjson.__version__)
        raise typer.Exit()


app = typer.Typer(
    name="xlsxjson",
    help=_MAIN_HELP,
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

sheet_app = typer.Typer(
    name="sheet", help="Sheet listing and discovery.",
    epilog=_SHEET_EPILOG,
    no_args_is_help=True, rich_markup_mode="markdown",
)

app.add_typer(sheet_app)


@app.callback(invoke_without_command=True)
def main_callback(
    version: Annotated[
        bool, typer.Option("--version", "-V", help="Print version and exit.", is_eager=True)
    ] = False,
) -> None:
    if version:
        _version_callback(True)


# Type aliases for common options
FilePath = Annotated[str, typer.Option("--file", "-f", help="Path to .xlsx/.xlsm workbook file")]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _emit(envelope, code=None):
    print_response(envelope)
    raise typer.Exit(code if code is not None else exit_code_for(envelope))


# ---------------------------------------------------------------------------
# xlsxjson version
# ---------------------------------------------------------------------------
@app.command()
def version():
    """Print the xlsxjson version.

    Example: `xlsxjson version`
    """
    env = success_envelope("version", {"version": xlsxjson.__version__})
    _emit(env)


# ---------------------------------------------------------------------------
# xlsxjson read
# ---------------------------------------------------------------------------
@app.command("read")
def read_cmd(
    file: Annotated[Optional[str], typer.Option("--file", "-f", help="Path to .xlsx/.xlsm workbook file (or 'path' in --config)")] = None,
    range_ref: Annotated[Optional[str], typer.Option("--range", "-r", help="Cell range as StartCell:EndCell (default A1:A1)")] = None,
    sheet_index: Annotated[Optional[int], typer.Option("--sheet-index", "-s", help="Zero-based worksheet index (default 0)")] = None,
    headers: Annotated[Optional[bool], typer.Option("--headers/--no-headers", help="Use the first row of the range as keys (default on)")] = None,
    date_header: Annotated[Optional[str], typer.Option("--date-header", help="Date pattern for header cells (default yyyy-MM-dd)")] = None,
    date_body: Annotated[Optional[str], typer.Option("--date-body", help="Date pattern for data cells (default yyyy-MM-dd HH:mm:ss.SSS)")] = None,
    config: Annotated[Optional[str], typer.Option("--config", "-c", help="YAML properties file with read options; flags override it")] = None,
    out: Annotated[Optional[str], typer.Option("--out", "-o", help="Also write the JSON records array to this file")] = None,
    raw: Annotated[bool, typer.Option("--raw", help="Print only the JSON records array instead of the envelope")] = False,
    events: Annotated[bool, typer.Option("--events", help="Emit NDJSON lifecycle events to stderr")] = False,
):
    """Read a cell range and return it as JSON records.

    With headers on, the first row of the range supplies the keys and the
    remaining rows become records. Missing or blank header cells get their
    position in the range as key. With `--no-headers` every row is a record
    keyed "0", "1", ...

    Cell values: booleans and numbers stay JSON booleans and numbers, text
    is copied verbatim, date cells are formatted with the date pattern,
    blanks become "", error cells their error text (e.g. "#DIV/0!").
    Formulas are read as the result cached in the file.

    Date patterns use the letters yyyy MM dd HH mm ss SSS (plus MMM, EEE,
    hh, a, ...); quote literal text with single quotes.

    Example: `xlsxjson read -f data.xlsx --range A1:C50`

    Example: `xlsxjson read -f data.xlsx --range B3:F3 --no-headers --sheet-index 1 --raw`

    Example: `xlsxjson read --config props.yaml --out records.json`
    """
    from xlsxjson.engine.reader import run_read, to_json
    from xlsxjson.io.fileops import atomic_write

    emitter = EventEmitter(enabled=events)
    with Timer() as t:
        try:
            properties = load_properties(config) if config else {}
            options = build_options(
                properties,
                path=file,
                range=range_ref,
                sheet_index=sheet_index,
                headers=headers,
                format_date_header=date_header,
                format_date_body=date_body,
            )
        except ConfigError as e:
            env = error_envelope(
                "read", e.code, str(e),
                target=Target(file=file, ref=range_ref),
                details={"issues": e.details} if e.details else None,
                duration_ms=t.elapsed_ms,
            )
            _emit(env)
            return

        env = run_read(options, emitter=emitter)

    if env.ok and out:
        try:
            atomic_write(out, to_json(env.result["records"]))
        except OSError as e:
            env = error_envelope("read", "ERR_IO_WRITE", f"Cannot write {out}: {e}", target=env.target)
            _emit(env)
            return

    if raw:
        if env.ok:
            sys.stdout.write(to_json(env.result["records"]) + "\n")
            raise typer.Exit(0)
        _emit(env)
        return
    _emit(env)


# ---------------------------------------------------------------------------
# xlsxjson sheet ls
# ---------------------------------------------------------------------------
@sheet_app.command("ls")
def sheet_ls(
    file: FilePath,
):
    """List all worksheets with name, zero-based index, and dimensions.

    Use this to find the `--sheet-index` for `xlsxjson read`.

    Example: `xlsxjson sheet ls -f data.xlsx`
    """
    from xlsxjson.engine.context import WorkbookContext

    with Timer() as t:
        try:
            with WorkbookContext(file) as ctx:
                sheets = ctx.list_sheets()
        except ReadError as e:
            env = error_envelope("sheet.ls", e.code, str(e), target=Target(file=file))
            _emit(env)
            return

    env = success_envelope(
        "sheet.ls",
        [s.model_dump() for s in sheets],
        target=Target(file=file),
        duration_ms=t.elapsed_ms,
    )
    _emit(env)


# ---------------------------------------------------------------------------
# xlsxjson serve
# ---------------------------------------------------------------------------
@app.command("serve")
def serve_cmd(
    stdio: Annotated[bool, typer.Option("--stdio", help="Serve JSON-lines requests over stdin/stdout")] = True,
):
    """Run as a long-lived pipeline step reading JSON requests from stdin.

    Each input line is `{"id": "...", "command": "read", "args": {...}}`;
    each output line is the response envelope for that request.

    Example: `xlsxjson serve --stdio`
    """
    from xlsxjson.server.stdio import StdioServer

    server = StdioServer()
    server.run()


# ---------------------------------------------------------------------------
# Entrypoint (for `python -m xlsxjson`)
# ---------------------------------------------------------------------------
def main() -> None:
    try:
        app()
    except SystemExit:
        raise
    except Exception as exc:
        # Any unhandled exception becomes a JSON error envelope.
        env = error_envelope(
            "unknown",
            "ERR_INTERNAL",
            str(exc),
        )
        print_response(env)
        raise SystemExit(90) from exc


if __name__ == "__main__":
    main()
