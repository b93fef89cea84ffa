"""Task source backed by the Taskwarrior ``task`` executable."""

from __future__ import annotations

import json
import logging
import shlex
from typing import Sequence

from pydantic import ValidationError

from ..errors import ExternalProcessFailure, RecordConversionFailure, TaskVersionError
from ..models import TaskRecord
from ..reports.models import ReportDefinition
from ..taskcli import ExecutionResult, TaskCli, parse_version
from .base import TaskId

logger = logging.getLogger(__name__)

BASE_FLAGS: tuple[str, ...] = (
    "rc.json.array=on",
    "rc.confirmation=off",
    "rc.json.depends.array=on",
    "rc.color=off",
    "rc._forcecolor=off",
)

MUTATION_FLAGS: tuple[str, ...] = (
    "rc.bulk=0",
    "rc.confirmation=off",
    "rc.dependency.confirmation=off",
    "rc.recurrence.confirmation=off",
)

# Taskwarrior 3 accepts a report name after ``export`` and raw context filters.
REPORT_EXPORT_VERSION = (3, 0, 0)


def probe_version(cli: TaskCli) -> tuple[int, int, int]:
    """Ask the executable for its version; any failure here is fatal."""

    result = cli.version()
    if not result.ok:
        raise TaskVersionError(
            result.args,
            result.stderr or "task --version exited with a non-zero status",
            result.returncode,
        )
    version = parse_version(result.stdout)
    if version is None:
        raise TaskVersionError(
            result.args,
            f"Unable to parse version from {result.stdout.strip()!r}",
            result.returncode,
        )
    return version


def decode_export(stdout: str) -> list[TaskRecord]:
    """Decode a ``task export`` JSON document into records."""

    try:
        payload = json.loads(stdout) if stdout.strip() else []
    except json.JSONDecodeError as exc:
        raise RecordConversionFailure(f"task export returned invalid JSON: {exc}") from exc

    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise RecordConversionFailure(
            f"task export returned {type(payload).__name__}, expected an array"
        )

    try:
        return [TaskRecord.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise RecordConversionFailure(f"task export contained an invalid record: {exc}") from exc


class ShellTaskSource:
    """Run one ``task`` process per operation.

    There is no shared state between calls apart from the version probed at
    construction time.
    """

    def __init__(self, cli: TaskCli, *, version: tuple[int, int, int] | None = None) -> None:
        self._cli = cli
        self.version = version if version is not None else probe_version(cli)
        logger.debug("Detected Taskwarrior version %s", ".".join(map(str, self.version)))

    @property
    def supports_report_export(self) -> bool:
        return self.version >= REPORT_EXPORT_VERSION

    def _run(self, *args: str) -> ExecutionResult:
        result = self._cli.run(*args)
        if not result.ok:
            raise ExternalProcessFailure(result.args, result.stderr, result.returncode)
        return result

    def export(self, filter: str, report: str, context_filter: str = "") -> list[TaskRecord]:
        args: list[str] = list(BASE_FLAGS)

        if filter.strip():
            args.append(f"rc.report.{report}.filter={filter.strip()}")

        if context_filter.strip():
            if self.supports_report_export:
                args.extend(shlex.split(context_filter))
            else:
                args.append(f"({context_filter.strip()})")

        args.append("export")
        if self.supports_report_export:
            args.append(report)

        result = self._run(*args)
        records = decode_export(result.stdout)
        logger.info("Exported %d tasks for report %s", len(records), report)
        return records

    def add(self, description: str, attrs: Sequence[str] = ()) -> None:
        self._run(*BASE_FLAGS, "add", description, *attrs)

    def _mutate(self, uuids: Sequence[TaskId], *command: str) -> None:
        if not uuids:
            # Without ids the command would apply to every task.
            logger.debug("Skipping %s without task ids", command)
            return
        self._run(*BASE_FLAGS, *MUTATION_FLAGS, *(str(uuid) for uuid in uuids), *command)

    def mark_done(self, uuids: Sequence[TaskId]) -> None:
        self._mutate(uuids, "done")

    def delete(self, uuids: Sequence[TaskId]) -> None:
        self._mutate(uuids, "delete")

    def modify(self, uuids: Sequence[TaskId], modifications: str) -> None:
        self._mutate(uuids, "modify", *shlex.split(modifications))

    def detail(self, uuid: TaskId) -> TaskRecord | None:
        result = self._cli.run(*BASE_FLAGS, str(uuid), "export")
        if not result.ok:
            return None
        records = decode_export(result.stdout)
        return records[0] if records else None

    def sync(self) -> None:
        self._run(*BASE_FLAGS, "sync")

    def report_definition(self, name: str) -> ReportDefinition | None:
        """Read ``report.<name>.*`` from the Taskwarrior configuration."""

        prefix = f"report.{name}."
        result = self._run(*BASE_FLAGS, "show", "rc.defaultwidth=0", prefix)

        values: dict[str, str] = {}
        for line in result.stdout.splitlines():
            if not line.startswith(prefix):
                continue
            key, _, value = line.partition(" ")
            values[key[len(prefix):]] = value.strip()

        columns = values.get("columns")
        if not columns:
            return None
        return ReportDefinition(
            name=name,
            columns=columns,
            labels=values.get("labels") or None,
            filter=values.get("filter") or None,
            description=values.get("description") or None,
        )


__all__ = [
    "BASE_FLAGS",
    "MUTATION_FLAGS",
    "REPORT_EXPORT_VERSION",
    "ShellTaskSource",
    "decode_export",
    "probe_version",
]
