"""Turn task records into a column-pruned table of display strings."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Sequence

from ..models import AttributeValue, TaskRecord
from .formatting import (
    display_width,
    format_date,
    format_duration,
    is_duration_field,
    truncate_to_width,
    vague_format_date_time,
)
from .models import ReportDefinition

VIRTUAL_TAGS = frozenset(
    {
        "PROJECT",
        "BLOCKED",
        "UNBLOCKED",
        "BLOCKING",
        "DUE",
        "DUETODAY",
        "TODAY",
        "OVERDUE",
        "WEEK",
        "MONTH",
        "QUARTER",
        "YEAR",
        "ACTIVE",
        "SCHEDULED",
        "PARENT",
        "CHILD",
        "UNTIL",
        "WAITING",
        "ANNOTATED",
        "READY",
        "YESTERDAY",
        "TOMORROW",
        "TAGGED",
        "PENDING",
        "COMPLETED",
        "DELETED",
        "UDA",
        "ORPHAN",
        "PRIORITY",
        "LATEST",
        "RECURRING",
        "INSTANCE",
        "TEMPLATE",
    }
)

# Historical fields age towards "now"; the others count down to a moment.
HISTORICAL_DATES = frozenset({"entry", "start", "end", "modified"})
FUTURE_DATES = frozenset({"due", "until", "wait", "scheduled"})
VAGUE_SUFFIXES = frozenset({"relative", "age", "countdown", "remaining"})


def simplify_table(rows: Sequence[Sequence[str]], labels: Sequence[str]) -> tuple[list[list[str]], list[str]]:
    """Drop every column whose cells are empty in all rows."""

    if not rows:
        return [], []

    widths = [0] * len(rows[0])
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] += len(cell)

    keep = [index for index, total in enumerate(widths) if total != 0]
    simplified = [[row[index] for index in keep] for row in rows]
    headers = [labels[index] for index in keep if index < len(labels)]
    return simplified, headers


def _format_number(value: AttributeValue) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_seconds(value: AttributeValue) -> int | None:
    try:
        return int(value)
    except (ValueError, OverflowError):
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


class ReportTable:
    """Formats tasks for one report.

    The column and label lists are checked when the table is built, so a
    misconfigured report fails before any row is rendered.
    """

    def __init__(
        self,
        report: ReportDefinition,
        *,
        description_width: int = 100,
        vague_precise: bool = False,
        duration_human_readable: bool = True,
        virtual_tags: frozenset[str] = VIRTUAL_TAGS,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.report = report
        self.columns, self.labels = report.resolve()
        self.description_width = max(description_width, 0)
        self.vague_precise = vague_precise
        self.duration_human_readable = duration_human_readable
        self.virtual_tags = virtual_tags
        self._now = now or datetime.now
        self.rows: list[list[str]] = []

    def generate(self, tasks: Sequence[TaskRecord]) -> list[list[str]]:
        self.rows = []
        if not self.columns:
            return self.rows
        for task in tasks:
            self.rows.append([self.attribute(name, task, tasks) for name in self.columns])
        return self.rows

    def simplify(self) -> tuple[list[list[str]], list[str]]:
        return simplify_table(self.rows, self.labels)

    def render(self, tasks: Sequence[TaskRecord]) -> tuple[list[list[str]], list[str]]:
        """Generate rows for ``tasks`` and return the simplified ``(rows, labels)``."""

        self.generate(tasks)
        return self.simplify()

    def _date_attribute(self, field: str, modifier: str | None, task: TaskRecord) -> str:
        value: datetime | None = getattr(task, field)
        if value is None:
            return ""
        if modifier is None:
            return format_date(value)
        now = self._now()
        if field in HISTORICAL_DATES:
            return vague_format_date_time(value, now, self.vague_precise)
        return vague_format_date_time(now, value, self.vague_precise)

    def _description(self, modifier: str | None, task: TaskRecord) -> str:
        description = task.description
        count = task.annotation_count
        suffix = f"[{count}]" if count else ""

        if modifier in (None, "desc"):
            return description
        if modifier == "count":
            return f"{description} {suffix}" if suffix else description
        if modifier == "truncated":
            return truncate_to_width(description, self.description_width)
        if modifier == "truncated_count":
            # The suffix is dropped when it alone would not fit the width.
            if display_width(suffix) > self.description_width:
                return truncate_to_width(description, self.description_width)
            available = self.description_width - display_width(suffix)
            return truncate_to_width(description, available) + suffix
        return ""

    def _depends(self, task: TaskRecord, tasks: Sequence[TaskRecord]) -> str:
        ids_by_uuid = {other.uuid: other.id for other in tasks}
        resolved = [
            str(ids_by_uuid[dependency])
            for dependency in task.depends
            if ids_by_uuid.get(dependency) is not None
        ]
        return " ".join(resolved)

    def _user_attribute(self, name: str, task: TaskRecord) -> str:
        value = task.attributes.get(name)
        if value is None:
            return ""
        if self.duration_human_readable and is_duration_field(name):
            seconds = _as_seconds(value)
            if seconds is not None:
                return format_duration(seconds, self.vague_precise)
        return _format_number(value)

    def attribute(self, name: str, task: TaskRecord, tasks: Sequence[TaskRecord]) -> str:
        """Return the display string for column ``name`` of ``task``.

        ``tasks`` is the full result set, used to resolve dependencies to ids.
        """

        field, _, modifier = name.partition(".")
        modifier = modifier or None

        if name == "id":
            return "" if task.id is None else str(task.id)
        if field in HISTORICAL_DATES or field in FUTURE_DATES:
            if modifier is None or modifier in VAGUE_SUFFIXES:
                return self._date_attribute(field, modifier, task)
        if name == "status":
            return task.status.display_name
        if name == "status.short":
            return task.status.display_name[:1]
        if name in ("priority", "project", "recur"):
            return getattr(task, name) or ""
        if name in ("tags", "tags.count"):
            tags = [tag for tag in task.tags if tag not in self.virtual_tags]
            if name == "tags":
                return ",".join(tags)
            return str(len(tags)) if tags else ""
        if name == "depends":
            return self._depends(task, tasks)
        if name == "depends.count":
            return str(len(task.depends)) if task.depends else ""
        if field == "description":
            return self._description(modifier, task)
        if name == "urgency":
            return f"{task.urgency:.2f}"
        return self._user_attribute(name, task)


__all__ = ["ReportTable", "VIRTUAL_TAGS", "simplify_table"]
