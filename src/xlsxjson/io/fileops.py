"""File helpers: workbook fingerprints, atomic output files, properties text."""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path

_CHUNK = 64 * 1024


def fingerprint(path: str | Path) -> str:
    """``sha256:<hex>`` digest of a file's bytes."""
    digest = hashlib.sha256()
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK), b""):
            digest.update(chunk)
    return "sha256:" + digest.hexdigest()


def atomic_write(target: str | Path, data: bytes | str) -> Path:
    """Write ``data`` to a temp file beside ``target`` and rename it into place.

    Readers of ``target`` see either the previous file or the complete new
    one. Text is written as UTF-8.
    """
    target = Path(target)
    if isinstance(data, str):
        data = data.encode("utf-8")
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".xlsxjson_tmp_", suffix=target.suffix)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, target)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise
    return target


def read_text_safe(path: str | Path) -> str:
    """Read UTF-8 text, dropping a leading byte order mark if one is present."""
    return Path(path).read_text(encoding="utf-8-sig")
