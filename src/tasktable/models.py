"""Unified task record model shared by every task source."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

AttributeValue = Union[str, int, float]

TASKWARRIOR_DATE_FORMAT = "%Y%m%dT%H%M%SZ"

DATE_FIELDS = ("entry", "start", "end", "due", "until", "wait", "scheduled", "modified")


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    DELETED = "deleted"
    WAITING = "waiting"
    RECURRING = "recurring"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.display_name


def parse_timestamp(value: Any) -> Any:
    """Normalize exported timestamps to naive local datetimes.

    Taskwarrior writes UTC timestamps as ``20240131T120000Z``; ISO 8601 strings
    are accepted as well. Naive inputs are assumed to already be local time.
    """

    if value is None or value == "":
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = datetime.strptime(text, TASKWARRIOR_DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        value = parsed
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class Annotation(BaseModel):
    """A timestamped note attached to a task."""

    entry: datetime | None = None
    description: str = ""

    @field_validator("entry", mode="before")
    @classmethod
    def _parse_entry(cls, value: Any) -> Any:
        return parse_timestamp(value)


class TaskRecord(BaseModel):
    """Backend-agnostic representation of a single task.

    Keys the model does not know about (user defined attributes such as
    ``estimate`` or ``totalactivetime``) are collected into ``attributes``.
    """

    model_config = ConfigDict(extra="ignore")

    uuid: UUID
    id: int | None = None
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    project: str | None = None
    priority: str | None = None
    recur: str | None = None
    tags: list[str] = Field(default_factory=list)
    entry: datetime
    start: datetime | None = None
    end: datetime | None = None
    due: datetime | None = None
    until: datetime | None = None
    wait: datetime | None = None
    scheduled: datetime | None = None
    modified: datetime | None = None
    urgency: float = 0.0
    depends: list[UUID] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)
    attributes: dict[str, AttributeValue] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_attributes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        payload = {key: value for key, value in data.items() if key in known}
        attributes = dict(payload.get("attributes") or {})
        for key, value in data.items():
            if key in known or isinstance(value, bool):
                continue
            if isinstance(value, (str, int, float)):
                attributes[key] = value
        payload["attributes"] = attributes
        return payload

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("id", mode="before")
    @classmethod
    def _drop_zero_id(cls, value: Any) -> Any:
        # Taskwarrior exports id 0 for tasks that are no longer pending.
        if value in (0, "0", None, ""):
            return None
        return value

    @field_validator("depends", mode="before")
    @classmethod
    def _split_depends(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _ensure_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part for part in value.split(",") if part]
        return value

    @property
    def annotation_count(self) -> int:
        return len(self.annotations)

    def to_document(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping with attributes flattened to the top level."""

        payload = self.model_dump(mode="json", exclude_none=True, exclude={"attributes"})
        for key, value in self.attributes.items():
            payload.setdefault(key, value)
        return payload


__all__ = [
    "Annotation",
    "AttributeValue",
    "DATE_FIELDS",
    "TaskRecord",
    "TaskStatus",
    "parse_timestamp",
]
