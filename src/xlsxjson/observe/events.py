"""Conversion lifecycle events (NDJSON) and timing."""

from __future__ import annotations

import json
import sys
import time
from datetime import datetime, timezone
from typing import IO, Any


def _ms_since(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class Timer:
    """Context manager recording the duration of its block in ``elapsed_ms``."""

    def __init__(self) -> None:
        self._started = 0.0
        self.elapsed_ms = 0

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.elapsed_ms = _ms_since(self._started)


class EventEmitter:
    """Writes one JSON line per lifecycle event (``read.start``, ``read.headers``, ...).

    A disabled emitter drops every event. Lines go to stderr unless another
    stream is given; stdout carries the response envelope.
    """

    def __init__(self, enabled: bool = False, stream: IO[str] | None = None) -> None:
        self.enabled = enabled
        self.stream = stream
        self.seq = 0

    def emit(self, event: str, data: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        self.seq += 1
        line = json.dumps(
            {
                "event": event,
                "seq": self.seq,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "data": data or {},
            },
            default=str,
        )
        out = self.stream or sys.stderr
        out.write(line + "\n")
        out.flush()
