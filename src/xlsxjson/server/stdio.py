"""stdio server mode: JSON line-delimited protocol over stdin/stdout."""

from __future__ import annotations

import sys
from typing import IO, Any

import orjson

from xlsxjson.contracts.common import ReadError, ResponseEnvelope, Target
from xlsxjson.engine.config import ConfigError, build_options
from xlsxjson.engine.context import WorkbookContext
from xlsxjson.engine.dispatcher import error_envelope, success_envelope
from xlsxjson.engine.reader import run_read
from xlsxjson.observe.events import EventEmitter


class StdioServer:
    """Request/response loop for running as a pipeline step.

    Every request is handled independently: each ``read`` opens and closes
    its own workbook.
    """

    def __init__(self, *, emitter: EventEmitter | None = None) -> None:
        self.emitter = emitter or EventEmitter()

    def handle_request(self, request: dict[str, Any]) -> dict[str, Any]:
        req_id = request.get("id", "")
        command = request.get("command", "")
        args = request.get("args") or {}

        if not isinstance(args, dict):
            env = error_envelope(command, "ERR_INVALID_ARGUMENT", "'args' must be an object")
        elif command == "read":
            env = self._read(args)
        elif command == "sheet.ls":
            env = self._sheet_ls(args)
        else:
            env = error_envelope(command or "unknown", "ERR_USAGE", f"Unknown command: {command}")
        return {"id": req_id, **env.model_dump(mode="json")}

    def _read(self, args: dict[str, Any]) -> ResponseEnvelope:
        try:
            options = build_options(args)
        except ConfigError as e:
            return error_envelope(
                "read", e.code, str(e),
                target=Target(file=args.get("path"), ref=args.get("range")),
                details={"issues": e.details} if e.details else None,
            )
        return run_read(options, emitter=self.emitter)

    def _sheet_ls(self, args: dict[str, Any]) -> ResponseEnvelope:
        file = args.get("path") or args.get("file")
        if not file:
            return error_envelope("sheet.ls", "ERR_MISSING_PARAM", "Missing 'path' in args")
        try:
            with WorkbookContext(file) as ctx:
                sheets = ctx.list_sheets()
        except ReadError as e:
            return error_envelope("sheet.ls", e.code, str(e), target=Target(file=file))
        return success_envelope("sheet.ls", [s.model_dump() for s in sheets], target=Target(file=file))

    def run(self, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> None:
        """Main server loop: read JSON lines from stdin, write responses to stdout."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                request = orjson.loads(line)
            except orjson.JSONDecodeError as e:
                response: dict[str, Any] = error_envelope(
                    "unknown", "ERR_USAGE", f"Invalid JSON: {e}"
                ).model_dump(mode="json")
            else:
                if isinstance(request, dict):
                    response = self.handle_request(request)
                else:
                    response = error_envelope(
                        "unknown", "ERR_USAGE", "Request must be a JSON object"
                    ).model_dump(mode="json")

            stdout.write(orjson.dumps(response).decode() + "\n")
            stdout.flush()
