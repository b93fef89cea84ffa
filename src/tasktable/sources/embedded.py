"""Task source backed by an embedded on-disk database."""

from __future__ import annotations

import json
import logging
import shlex
import threading
from datetime import datetime
from typing import Any, Callable, Sequence
from uuid import uuid4

from pydantic import ValidationError

from ..errors import RecordConversionFailure
from ..filters import apply_filter, extract_limit
from ..models import AttributeValue, TaskRecord, TaskStatus, parse_timestamp
from ..reports.loader import ReportLoader
from ..reports.models import BUILTIN_REPORTS, ReportDefinition
from .base import TaskId
from .database import TaskDatabase

logger = logging.getLogger(__name__)

TEXT_FIELDS = frozenset({"project", "priority", "recur", "description"})
SETTABLE_DATES = frozenset({"due", "wait", "scheduled", "until", "start"})


def _coerce_attribute(value: str) -> AttributeValue:
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def apply_modifications(record: TaskRecord, args: Sequence[str]) -> TaskRecord:
    """Return a copy of ``record`` with Taskwarrior-style modifications applied.

    ``+tag`` and ``-tag`` add and remove tags, ``key:value`` sets a field or a
    user defined attribute (an empty value clears it) and a bare word is
    treated as a tag.
    """

    payload: dict[str, Any] = record.model_dump()
    tags: list[str] = payload["tags"]
    attributes: dict[str, AttributeValue] = payload["attributes"]

    for arg in args:
        if arg.startswith("+") and len(arg) > 1:
            if arg[1:] not in tags:
                tags.append(arg[1:])
            continue
        if arg.startswith("-") and len(arg) > 1:
            if arg[1:] in tags:
                tags.remove(arg[1:])
            continue

        key, separator, value = arg.partition(":")
        if not separator:
            if arg and arg not in tags:
                tags.append(arg)
            continue

        if key == "status":
            raise ValueError("Task status changes go through mark_done or delete")
        if key in TEXT_FIELDS:
            if key == "description":
                payload[key] = value
            else:
                payload[key] = value or None
        elif key in SETTABLE_DATES:
            try:
                payload[key] = parse_timestamp(value)
            except ValueError as exc:
                raise ValueError(f"Invalid date for {key}: {value!r}") from exc
        elif key == "depends":
            payload[key] = [part for part in value.split(",") if part]
        elif key in TaskRecord.model_fields:
            raise ValueError(f"Task field '{key}' cannot be modified")
        elif value:
            attributes[key] = _coerce_attribute(value)
        else:
            attributes.pop(key, None)

    return TaskRecord.model_validate(payload)


class EmbeddedTaskSource:
    """Read and write tasks in a local database guarded by a single lock.

    Mutations that name an unknown uuid succeed without effect, unlike the
    shell source where Taskwarrior reports an error.
    """

    def __init__(
        self,
        database: TaskDatabase,
        *,
        report_loader: ReportLoader | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._database = database
        self._report_loader = report_loader
        self._clock = clock or datetime.now
        self._lock = threading.Lock()

    @staticmethod
    def _convert(document: str) -> TaskRecord | None:
        try:
            payload = json.loads(document)
            if payload.get("status") == TaskStatus.DELETED.value:
                return None
            return TaskRecord.model_validate(payload)
        except (json.JSONDecodeError, AttributeError, ValidationError) as exc:
            raise RecordConversionFailure(f"Stored task could not be converted: {exc}") from exc

    def _load(self, uuid: TaskId) -> TaskRecord | None:
        document = self._database.get(str(uuid))
        if document is None:
            return None
        try:
            return TaskRecord.model_validate(json.loads(document))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise RecordConversionFailure(f"Stored task {uuid} could not be converted: {exc}") from exc

    def _store(self, record: TaskRecord) -> None:
        self._database.put(str(record.uuid), record.to_document())

    def _report_filter(self, report: str) -> str:
        definition: ReportDefinition | None = None
        if self._report_loader is not None:
            definition = self._report_loader.get(report)
        if definition is None:
            definition = BUILTIN_REPORTS.get(report)
        return (definition.filter if definition else None) or ""

    def export(self, filter: str, report: str, context_filter: str = "") -> list[TaskRecord]:
        with self._lock:
            records = [
                record
                for record in (self._convert(document) for document in self._database.all())
                if record is not None
            ]

        records.sort(key=lambda record: (record.entry, str(record.uuid)))
        effective = filter if filter.strip() else self._report_filter(report)
        records = apply_filter(records, effective)
        limit = extract_limit(effective)
        if limit is not None:
            records = records[:limit]

        logger.info("Embedded backend exported %d tasks for report %s", len(records), report)
        return records

    def add(self, description: str, attrs: Sequence[str] = ()) -> None:
        now = self._clock()
        record = TaskRecord(
            uuid=uuid4(),
            description=description,
            status=TaskStatus.PENDING,
            entry=now,
            modified=now,
        )
        record = apply_modifications(record, attrs)
        with self._lock:
            self._store(record)
        logger.info("Embedded backend added task %s", record.uuid)

    def _update(self, uuids: Sequence[TaskId], change: Callable[[TaskRecord], TaskRecord | None]) -> int:
        changed = 0
        with self._lock:
            for uuid in uuids:
                record = self._load(uuid)
                if record is None:
                    logger.debug("Task %s not found; nothing to change", uuid)
                    continue
                updated = change(record)
                if updated is None:
                    continue
                self._store(updated)
                changed += 1
        return changed

    def _finish(self, record: TaskRecord, status: TaskStatus) -> TaskRecord | None:
        if record.status is TaskStatus.DELETED:
            return None
        if record.status is TaskStatus.COMPLETED and status is TaskStatus.COMPLETED:
            return None
        now = self._clock()
        return record.model_copy(update={"status": status, "end": now, "modified": now})

    def mark_done(self, uuids: Sequence[TaskId]) -> None:
        changed = self._update(uuids, lambda record: self._finish(record, TaskStatus.COMPLETED))
        logger.info("Embedded backend marked %d tasks as done", changed)

    def delete(self, uuids: Sequence[TaskId]) -> None:
        changed = self._update(uuids, lambda record: self._finish(record, TaskStatus.DELETED))
        logger.info("Embedded backend deleted %d tasks", changed)

    def modify(self, uuids: Sequence[TaskId], modifications: str) -> None:
        args = shlex.split(modifications)

        def change(record: TaskRecord) -> TaskRecord | None:
            if record.status is TaskStatus.DELETED:
                return None
            updated = apply_modifications(record, args)
            return updated.model_copy(update={"modified": self._clock()})

        changed = self._update(uuids, change)
        logger.info("Embedded backend modified %d tasks with %r", changed, modifications)

    def detail(self, uuid: TaskId) -> TaskRecord | None:
        with self._lock:
            record = self._load(uuid)
        if record is None or record.status is TaskStatus.DELETED:
            return None
        return record

    def sync(self) -> None:
        logger.info("Embedded backend has no sync server configured; nothing to sync")

    def report_definition(self, name: str) -> ReportDefinition | None:
        return None


__all__ = ["EmbeddedTaskSource", "apply_modifications"]
