"""String formatting helpers for report cells."""

from __future__ import annotations

import unicodedata
from datetime import datetime

YEAR = 60 * 60 * 24 * 365
MONTH = 60 * 60 * 24 * 30
WEEK = 60 * 60 * 24 * 7
DAY = 60 * 60 * 24
HOUR = 60 * 60
MINUTE = 60

ELLIPSIS = "…"

# (unit size, threshold, suffix), largest first. Months need three full
# months and weeks two full weeks before they are preferred.
_BUCKETS: tuple[tuple[int, int, str], ...] = (
    (YEAR, YEAR, "y"),
    (MONTH, MONTH * 3, "mo"),
    (WEEK, WEEK * 2, "w"),
    (DAY, DAY, "d"),
    (HOUR, HOUR, "h"),
    (MINUTE, MINUTE, "min"),
    (1, 0, "s"),
)

_DURATION_MARKERS = ("time", "duration")
_DURATION_SUFFIXES = ("activetime", "totaltime", "worktime", "elapsed")


def vague_duration(seconds: int, with_remainder: bool = False) -> str:
    """Render a signed number of seconds using its largest fitting unit.

    >>> vague_duration(90, True)
    '1min30s'
    >>> vague_duration(-300)
    '-5min'
    """

    seconds = int(seconds)
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)

    for index, (size, threshold, suffix) in enumerate(_BUCKETS):
        if seconds < threshold:
            continue
        value = seconds // size
        if not with_remainder or size == 1:
            return f"{sign}{value}{suffix}"
        next_size, _, next_suffix = _BUCKETS[index + 1]
        remainder = (seconds - size * value) // next_size
        return f"{sign}{value}{suffix}{remainder}{next_suffix}"
    return f"{sign}{seconds}s"  # pragma: no cover - the last bucket always matches


def format_duration(seconds: int, with_remainder: bool = False) -> str:
    """Format a duration attribute value; identical units to :func:`vague_duration`."""

    return vague_duration(seconds, with_remainder)


def vague_format_date_time(from_dt: datetime, to_dt: datetime, with_remainder: bool = False) -> str:
    return vague_duration(int((to_dt - from_dt).total_seconds()), with_remainder)


def format_date(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d")


def format_date_time(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def is_duration_field(attribute: str) -> bool:
    """Guess whether a user defined attribute stores a number of seconds."""

    return any(marker in attribute for marker in _DURATION_MARKERS) or attribute.endswith(
        _DURATION_SUFFIXES
    )


def char_width(ch: str) -> int:
    """Return the terminal cell width of a single character."""

    if unicodedata.combining(ch) or unicodedata.category(ch) in ("Cf", "Mn", "Me"):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def truncate_to_width(text: str, width: int) -> str:
    """Cut ``text`` to at most ``width`` cells, ending with an ellipsis when shortened.

    The ellipsis counts against the budget, so the result never exceeds it.
    """

    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text

    budget = width - display_width(ELLIPSIS)
    kept: list[str] = []
    used = 0
    for ch in text:
        ch_width = char_width(ch)
        if used + ch_width > budget:
            break
        kept.append(ch)
        used += ch_width
    return "".join(kept) + ELLIPSIS


__all__ = [
    "DAY",
    "ELLIPSIS",
    "HOUR",
    "MINUTE",
    "MONTH",
    "WEEK",
    "YEAR",
    "char_width",
    "display_width",
    "format_date",
    "format_date_time",
    "format_duration",
    "is_duration_field",
    "truncate_to_width",
    "vague_duration",
    "vague_format_date_time",
]
