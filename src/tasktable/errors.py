"""Error types shared across task sources and report formatting."""

from __future__ import annotations

from typing import Sequence


class TaskTableError(RuntimeError):
    """Base class for tasktable errors."""


class ExternalProcessFailure(TaskTableError):
    """Raised when the task executable exits with a non-zero status."""

    def __init__(self, command: Sequence[str], diagnostic: str, returncode: int | None = None) -> None:
        self.command = tuple(command)
        self.diagnostic = diagnostic
        self.returncode = returncode
        joined = " ".join(self.command)
        super().__init__(f"Command failed ({returncode}): {joined}: {diagnostic.strip()}")


class TaskVersionError(ExternalProcessFailure):
    """Raised when the task executable version cannot be determined."""


class RecordConversionFailure(TaskTableError):
    """Raised when a fetched record cannot be mapped onto a TaskRecord."""


class StorageFailure(TaskTableError):
    """Raised when the embedded database fails to read or write."""


DatabaseIOFailure = StorageFailure


class ConfigurationMismatch(TaskTableError):
    """Raised when a report's column and label counts differ."""

    def __init__(self, report: str, columns: Sequence[str], labels: Sequence[str]) -> None:
        self.report = report
        self.columns = list(columns)
        self.labels = list(labels)
        super().__init__(
            f"Report '{report}' must have the same number of labels ({len(self.labels)}) "
            f"and columns ({len(self.columns)}); compare report.{report}.columns "
            f"and report.{report}.labels in your configuration"
        )


__all__ = [
    "ConfigurationMismatch",
    "DatabaseIOFailure",
    "ExternalProcessFailure",
    "RecordConversionFailure",
    "StorageFailure",
    "TaskTableError",
    "TaskVersionError",
]
