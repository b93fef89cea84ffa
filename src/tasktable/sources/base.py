"""The interface shared by every task source."""

from __future__ import annotations

from typing import Protocol, Sequence
from uuid import UUID

from ..models import TaskRecord
from ..reports.models import ReportDefinition

TaskId = UUID | str


class TaskSource(Protocol):
    """Exports and mutates task records against one concrete store."""

    def export(self, filter: str, report: str, context_filter: str = "") -> list[TaskRecord]:
        """Return the records matching ``filter`` for ``report``."""
        ...

    def add(self, description: str, attrs: Sequence[str] = ()) -> None:
        ...

    def mark_done(self, uuids: Sequence[TaskId]) -> None:
        ...

    def delete(self, uuids: Sequence[TaskId]) -> None:
        ...

    def modify(self, uuids: Sequence[TaskId], modifications: str) -> None:
        ...

    def detail(self, uuid: TaskId) -> TaskRecord | None:
        ...

    def sync(self) -> None:
        ...

    def report_definition(self, name: str) -> ReportDefinition | None:
        """Return the store's own definition of ``name``, if it keeps one."""
        ...


__all__ = ["TaskId", "TaskSource"]
