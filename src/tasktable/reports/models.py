"""Report definitions describing one tabular view of tasks."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..errors import ConfigurationMismatch


def derive_label(column: str) -> str:
    """Build a header label from a column identifier such as ``due.relative``."""

    label = column.split(".")[0]
    if label == "id":
        return "ID"
    return label[:1].upper() + label[1:]


class ReportDefinition(BaseModel):
    """Ordered column identifiers and their labels for a named report."""

    name: str = Field(..., description="Report name, e.g. 'next'.")
    columns: list[str] = Field(default_factory=list, description="Ordered column identifiers.")
    labels: list[str] = Field(
        default_factory=list,
        description="Header labels; derived from the columns when omitted.",
    )
    filter: str | None = Field(default=None, description="Default filter applied by the report.")
    description: str | None = Field(default=None, description="Human-friendly summary.")

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Report name must not be empty")
        return normalized

    @field_validator("columns", "labels", mode="before")
    @classmethod
    def _split_list(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",")]
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        raise TypeError("Columns and labels must be a list or a comma-separated string")

    def resolved_labels(self) -> list[str]:
        if self.labels:
            return list(self.labels)
        return [derive_label(column) for column in self.columns]

    def resolve(self) -> tuple[list[str], list[str]]:
        """Return ``(columns, labels)`` or raise if their lengths differ."""

        labels = self.resolved_labels()
        if len(labels) != len(self.columns):
            raise ConfigurationMismatch(self.name, self.columns, labels)
        return list(self.columns), labels


BUILTIN_REPORTS: dict[str, ReportDefinition] = {
    report.name: report
    for report in (
        ReportDefinition(
            name="next",
            columns=[
                "id", "start.age", "entry.age", "depends", "priority", "project", "tags",
                "recur", "scheduled.countdown", "due.relative", "until.remaining",
                "description", "urgency",
            ],
            labels=[
                "ID", "Active", "Age", "Deps", "P", "Project", "Tag", "Recur", "S", "Due",
                "Until", "Description", "Urg",
            ],
            filter="status:pending -WAITING limit:page",
            description="Most urgent tasks",
        ),
        ReportDefinition(
            name="list",
            columns=[
                "id", "start.age", "entry.age", "depends", "priority", "project", "tags",
                "recur", "scheduled.countdown", "due", "until.remaining", "description.count",
                "urgency",
            ],
            labels=[
                "ID", "Active", "Age", "D", "P", "Project", "Tags", "R", "Sch", "Due", "Until",
                "Description", "Urg",
            ],
            filter="status:pending -WAITING",
            description="Most details of tasks",
        ),
        ReportDefinition(
            name="all",
            columns=[
                "id", "status.short", "entry.age", "end.age", "depends", "priority",
                "project", "tags.count", "recur", "wait.remaining", "scheduled.remaining",
                "due", "until", "description",
            ],
            labels=[
                "ID", "St", "Age", "Done", "D", "P", "Project", "Tags", "R", "Wait", "Sch",
                "Due", "Until", "Description",
            ],
            description="All tasks",
        ),
        ReportDefinition(
            name="completed",
            columns=["entry", "end", "entry.age", "depends", "priority", "project", "tags",
                     "due", "description"],
            labels=["Created", "Completed", "Age", "Deps", "P", "Project", "Tags", "Due",
                    "Description"],
            filter="status:completed",
            description="Completed tasks",
        ),
    )
}


__all__ = ["BUILTIN_REPORTS", "ReportDefinition", "derive_label"]
