from __future__ import annotations

from datetime import datetime

import pytest

from tasktable.reports.formatting import (
    display_width,
    format_date,
    format_duration,
    is_duration_field,
    truncate_to_width,
    vague_duration,
    vague_format_date_time,
)


@pytest.mark.parametrize(
    ("seconds", "with_remainder", "expected"),
    [
        (0, False, "0s"),
        (30, False, "30s"),
        (60, False, "1min"),
        (90, False, "1min"),
        (90, True, "1min30s"),
        (1255, True, "20min55s"),
        (3600, False, "1h"),
        (3661, True, "1h1min"),
        (-300, False, "-5min"),
        (-3661, True, "-1h1min"),
        (86400, False, "1d"),
        (604800, False, "7d"),
        (1209600, False, "2w"),
        (2592000, False, "4w"),
        (7776000, False, "3mo"),
        (31536000, False, "1y"),
        (90061, True, "1d1h"),
    ],
)
def test_vague_duration(seconds: int, with_remainder: bool, expected: str) -> None:
    assert vague_duration(seconds, with_remainder) == expected
    assert format_duration(seconds, with_remainder) == expected


def test_vague_format_date_time_is_signed() -> None:
    earlier = datetime(2024, 1, 1, 12, 0)
    later = datetime(2024, 1, 3, 12, 0)

    assert vague_format_date_time(earlier, later) == "2d"
    assert vague_format_date_time(later, earlier) == "-2d"


def test_format_date() -> None:
    assert format_date(datetime(2024, 3, 9, 23, 59)) == "2024-03-09"


@pytest.mark.parametrize(
    "name",
    ["totalactivetime", "totaltime", "worktime", "elapsed", "customactivetime", "anyduration"],
)
def test_duration_fields(name: str) -> None:
    assert is_duration_field(name)


@pytest.mark.parametrize("name", ["description", "priority", "project", "status", "id", "urgency"])
def test_non_duration_fields(name: str) -> None:
    assert not is_duration_field(name)


def test_truncate_keeps_short_text() -> None:
    assert truncate_to_width("short", 10) == "short"
    assert truncate_to_width("exact", 5) == "exact"


def test_truncate_appends_ellipsis_within_budget() -> None:
    result = truncate_to_width("a long description", 8)

    assert result == "a long …"
    assert display_width(result) == 8


def test_truncate_zero_budget() -> None:
    assert truncate_to_width("anything", 0) == ""


@pytest.mark.parametrize(
    "text",
    ["plain ascii text", "日本語のタスクを書く", "café au lait", "mixed 漢字 and emoji 🎉 here"],
)
def test_truncate_never_exceeds_width(text: str) -> None:
    for width in range(0, 25):
        assert display_width(truncate_to_width(text, width)) <= width


def test_wide_characters_count_double() -> None:
    assert display_width("漢字") == 4
    assert display_width("é") == 1
    assert truncate_to_width("漢字漢字", 5) == "漢字…"
