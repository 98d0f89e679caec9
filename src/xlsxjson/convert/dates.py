"""Date patterns in the ``yyyy-MM-dd HH:mm:ss.SSS`` letter syntax.

Pipelines configure date output with the pattern letters of
``java.time.format.DateTimeFormatter``; this module compiles such a pattern
once and formats ``datetime`` values with it. Only the letters listed in
``_FIELDS`` are supported.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from typing import Any, Callable

# Day zero of the 1900 date system, used for time-only values.
EXCEL_EPOCH = datetime(1899, 12, 31)

_TOKEN_RE = re.compile(r"'((?:[^']|'')*)'|([A-Za-z])\2*|[^A-Za-z']+")


class DatePatternError(ValueError):
    """Raised when a date pattern uses unknown letters or is malformed."""


def _pad(value: int, width: int) -> str:
    return str(value).zfill(width)


def _year(dt: datetime, n: int) -> str:
    if n == 2:
        return _pad(dt.year % 100, 2)
    return _pad(dt.year, n)


def _month(dt: datetime, n: int) -> str:
    if n == 3:
        return calendar.month_abbr[dt.month]
    if n >= 4:
        return calendar.month_name[dt.month]
    return _pad(dt.month, n)


def _weekday(dt: datetime, n: int) -> str:
    if n >= 4:
        return calendar.day_name[dt.weekday()]
    return calendar.day_abbr[dt.weekday()]


def _hour12(dt: datetime, n: int) -> str:
    return _pad(dt.hour % 12 or 12, n)


def _fraction(dt: datetime, n: int) -> str:
    # Truncate, never round: nanosecond digits beyond microseconds are zero.
    return f"{dt.microsecond:06d}000"[:n].ljust(n, "0")


def _era(dt: datetime, n: int) -> str:
    if n == 4:
        return "Anno Domini"
    if n == 5:
        return "A"
    return "AD"


_QUARTER_NAMES = {1: "1st quarter", 2: "2nd quarter", 3: "3rd quarter", 4: "4th quarter"}


def _quarter(dt: datetime, n: int) -> str:
    q = (dt.month - 1) // 3 + 1
    if n == 3:
        return f"Q{q}"
    if n == 4:
        return _QUARTER_NAMES[q]
    if n == 5:
        return str(q)
    return _pad(q, n)


def _day_number(dt: datetime, n: int) -> str:
    # Weeks start on Monday (ISO-8601): Monday is 1, Sunday is 7.
    if n >= 3:
        return _weekday(dt, n)
    return _pad(dt.isoweekday(), n)


_FIELDS: dict[str, tuple[int, Callable[[datetime, int], str]]] = {
    "G": (5, _era),
    "y": (4, _year),
    "u": (4, _year),
    "M": (4, _month),
    "L": (4, _month),
    "Q": (5, _quarter),
    "q": (5, _quarter),
    "w": (2, lambda dt, n: _pad(dt.isocalendar()[1], n)),
    "d": (2, lambda dt, n: _pad(dt.day, n)),
    "D": (3, lambda dt, n: _pad(dt.timetuple().tm_yday, n)),
    "E": (4, _weekday),
    "e": (4, _day_number),
    "c": (4, _day_number),
    "a": (1, lambda dt, n: "AM" if dt.hour < 12 else "PM"),
    "H": (2, lambda dt, n: _pad(dt.hour, n)),
    "k": (2, lambda dt, n: _pad(dt.hour or 24, n)),
    "K": (2, lambda dt, n: _pad(dt.hour % 12, n)),
    "h": (2, _hour12),
    "m": (2, lambda dt, n: _pad(dt.minute, n)),
    "s": (2, lambda dt, n: _pad(dt.second, n)),
    "S": (9, _fraction),
    "n": (9, lambda dt, n: _pad(dt.microsecond * 1000, n)),
}

SUPPORTED_LETTERS = "".join(sorted(_FIELDS))


def as_datetime(value: Any) -> datetime:
    """Normalize the date-like values openpyxl produces to a ``datetime``."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, time):
        return datetime.combine(EXCEL_EPOCH.date(), value)
    if isinstance(value, timedelta):
        return EXCEL_EPOCH + value
    raise TypeError(f"Not a date value: {value!r}")


class DatePattern:
    """A compiled date pattern."""

    def __init__(self, pattern: str, parts: list[str | tuple[str, int]]) -> None:
        self.pattern = pattern
        self._parts = parts

    @classmethod
    def compile(cls, pattern: str) -> "DatePattern":
        return _compile(pattern)

    def format(self, value: Any) -> str:
        dt = as_datetime(value)
        out: list[str] = []
        for part in self._parts:
            if isinstance(part, str):
                out.append(part)
            else:
                letter, count = part
                out.append(_FIELDS[letter][1](dt, count))
        return "".join(out)

    def __repr__(self) -> str:
        return f"DatePattern({self.pattern!r})"


@lru_cache(maxsize=64)
def _compile(pattern: str) -> DatePattern:
    parts: list[str | tuple[str, int]] = []
    pos = 0
    while pos < len(pattern):
        m = _TOKEN_RE.match(pattern, pos)
        if m is None:
            raise DatePatternError(f"Unterminated quote at position {pos} in date pattern '{pattern}'")
        text = m.group(0)
        if m.group(1) is not None:
            # '' inside quotes (or on its own) is a literal quote
            parts.append(m.group(1).replace("''", "'") or "'")
        elif m.group(2) is not None:
            letter = m.group(2)
            if letter not in _FIELDS:
                raise DatePatternError(
                    f"Unknown pattern letter '{letter}' in date pattern '{pattern}'; "
                    f"supported letters are {SUPPORTED_LETTERS} (quote literal text with ')"
                )
            max_width, _ = _FIELDS[letter]
            if len(text) > max_width:
                raise DatePatternError(f"Too many pattern letters '{text}' in date pattern '{pattern}'")
            parts.append((letter, len(text)))
        else:
            parts.append(text)
        pos = m.end()
    return DatePattern(pattern, parts)


def format_date(value: Any, pattern: str) -> str:
    """Format a date-like value with a pattern string."""
    return DatePattern.compile(pattern).format(value)
