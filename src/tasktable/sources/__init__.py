"""Task sources: the ``task`` CLI or an embedded database."""

from __future__ import annotations

from ..config import TaskTableSettings
from ..reports.loader import ReportLoader
from ..taskcli import TaskCli
from .base import TaskId, TaskSource
from .database import TaskDatabase
from .embedded import EmbeddedTaskSource, apply_modifications
from .shell import ShellTaskSource


def create_source(settings: TaskTableSettings, *, report_loader: ReportLoader | None = None) -> TaskSource:
    """Build the task source selected by ``settings.backend``."""

    if settings.backend == "embedded":
        return EmbeddedTaskSource(TaskDatabase(settings.data_path), report_loader=report_loader)
    return ShellTaskSource(TaskCli(settings.task_path))


__all__ = [
    "EmbeddedTaskSource",
    "ShellTaskSource",
    "TaskDatabase",
    "TaskId",
    "TaskSource",
    "apply_modifications",
    "create_source",
]
