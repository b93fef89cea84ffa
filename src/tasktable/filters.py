"""A small interpreter for Taskwarrior-style filter strings.

Only a handful of term kinds carry meaning; every other term is accepted and
ignored so that filters written for the ``task`` CLI still load here:

``status:<value>``
    case-insensitive substring match against the status name.
``project:<value>``
    case-insensitive substring match; records without a project fail.
``+<tag>``
    the record must carry the tag (compared case-insensitively).
``-WAITING``
    the record must not have a wait date; other ``-<tag>`` terms are no-ops.
``limit:<n>`` / ``limit:page``
    not a predicate; see :func:`extract_limit`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .models import TaskRecord

PAGE_LIMIT = 25

TermKind = Literal["status", "project", "tag_include", "tag_exclude", "limit", "ignored"]


@dataclass(frozen=True, slots=True)
class FilterTerm:
    kind: TermKind
    value: str


def parse_term(term: str) -> FilterTerm:
    if term.startswith("status:"):
        return FilterTerm("status", term[len("status:"):])
    if term.startswith("project:"):
        return FilterTerm("project", term[len("project:"):])
    if term.startswith("limit:"):
        return FilterTerm("limit", term[len("limit:"):])
    if term.startswith("+") and len(term) > 1:
        return FilterTerm("tag_include", term[1:])
    if term.startswith("-") and len(term) > 1:
        return FilterTerm("tag_exclude", term[1:])
    return FilterTerm("ignored", term)


def parse_filter(text: str) -> list[FilterTerm]:
    """Split a filter string on whitespace into terms."""

    return [parse_term(term) for term in text.split()]


def _term_matches(record: TaskRecord, term: FilterTerm) -> bool:
    if term.kind == "status":
        return term.value.lower() in record.status.value.lower()
    if term.kind == "project":
        if record.project is None:
            return False
        return term.value.lower() in record.project.lower()
    if term.kind == "tag_include":
        wanted = term.value.lower()
        return any(tag.lower() == wanted for tag in record.tags)
    if term.kind == "tag_exclude":
        if term.value == "WAITING":
            return record.wait is None
        return True
    return True


def matches(record: TaskRecord, terms: Iterable[FilterTerm]) -> bool:
    """Return True when the record satisfies every term."""

    return all(_term_matches(record, term) for term in terms)


def apply_filter(records: Iterable[TaskRecord], text: str) -> list[TaskRecord]:
    terms = parse_filter(text)
    if not terms:
        return list(records)
    return [record for record in records if matches(record, terms)]


def extract_limit(text: str) -> int | None:
    """Return the row limit requested by a ``limit:`` term, if any.

    ``limit:page`` maps to one page of rows. When several ``limit:`` terms are
    present the first one that parses wins.
    """

    for term in parse_filter(text):
        if term.kind != "limit":
            continue
        if term.value == "page":
            return PAGE_LIMIT
        if term.value.isascii() and term.value.isdigit():
            return int(term.value)
    return None


__all__ = [
    "FilterTerm",
    "PAGE_LIMIT",
    "apply_filter",
    "extract_limit",
    "matches",
    "parse_filter",
    "parse_term",
]
