"""Tool registration for the tasktable MCP server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastmcp import Context, FastMCP

from ..config import TaskTableSettings
from ..reports import ReportLoader, ReportTable, resolve_report
from ..sources import TaskSource
from ..tracking import TrackingCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolHandles:
    export_report: Any
    add_task: Any
    complete_tasks: Any
    delete_tasks: Any
    modify_tasks: Any
    task_detail: Any
    sync_tasks: Any
    tracking_status: Any


def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Log through the module logger, tagging the MCP request id when there is one."""

    payload = dict(extra or {})
    request_id = getattr(context, "request_id", None) if context is not None else None
    if request_id is not None:
        payload["request_id"] = request_id
    log_method = getattr(logger, level, logger.info)
    log_method(message, extra=payload)


def register_tools(
    server: FastMCP,
    *,
    settings: TaskTableSettings,
    source: TaskSource,
    tracking: TrackingCache | None,
    report_loader: ReportLoader | None = None,
) -> ToolHandles:
    """Register tasktable's MCP tools on the server."""

    def _export_report(
        report: str | None = None,
        filter: str = "",
        context_filter: str = "",
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Export tasks for a report and return the simplified table."""

        report_name = report or settings.default_report
        definition = resolve_report(report_name, loader=report_loader, source=source)
        table = ReportTable(
            definition,
            description_width=settings.description_width,
            vague_precise=settings.vague_precise,
            duration_human_readable=settings.duration_human_readable,
        )
        effective_filter = filter or definition.filter or ""
        tasks = source.export(effective_filter, report_name, context_filter)
        rows, labels = table.render(tasks)

        tracked = [tracking.is_tracked(task.uuid) if tracking is not None else False for task in tasks]

        _emit_log(
            context,
            "info",
            "Exported report",
            extra={
                "report": report_name,
                "filter": effective_filter,
                "count": len(tasks),
                "columns": len(labels),
            },
        )

        return {
            "report": report_name,
            "labels": labels,
            "rows": rows,
            "tasks": [
                {"uuid": str(task.uuid), "id": task.id, "tracked": is_tracked}
                for task, is_tracked in zip(tasks, tracked)
            ],
            "count": len(tasks),
        }

    def _add_task(
        description: str,
        attrs: list[str] | None = None,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Create a new pending task."""

        source.add(description, attrs or [])
        _emit_log(context, "info", "Added task", extra={"description": description[:200]})
        return {"status": "added", "description": description}

    def _complete_tasks(uuids: list[str], context: Context | None = None) -> dict[str, Any]:
        """Mark tasks as completed."""

        source.mark_done(uuids)
        if tracking is not None:
            tracking.force_refresh()
        _emit_log(context, "info", "Completed tasks", extra={"count": len(uuids)})
        return {"status": "completed", "uuids": uuids}

    def _delete_tasks(uuids: list[str], context: Context | None = None) -> dict[str, Any]:
        """Delete tasks."""

        source.delete(uuids)
        _emit_log(context, "info", "Deleted tasks", extra={"count": len(uuids)})
        return {"status": "deleted", "uuids": uuids}

    def _modify_tasks(
        uuids: list[str],
        modifications: str,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Apply Taskwarrior-style modifications to tasks."""

        source.modify(uuids, modifications)
        _emit_log(
            context,
            "info",
            "Modified tasks",
            extra={"count": len(uuids), "modifications": modifications},
        )
        return {"status": "modified", "uuids": uuids, "modifications": modifications}

    def _task_detail(uuid: str, context: Context | None = None) -> dict[str, Any] | None:
        """Return every stored attribute of one task, or null when it does not exist."""

        record = source.detail(uuid)
        _emit_log(context, "debug", "Fetched task detail", extra={"uuid": uuid, "found": record is not None})
        if record is None:
            return None
        document = record.to_document()
        if tracking is not None:
            document["tracked"] = tracking.is_tracked(record.uuid)
        return document

    def _sync_tasks(context: Context | None = None) -> dict[str, Any]:
        """Synchronize the task store with its server."""

        source.sync()
        _emit_log(context, "info", "Synchronized tasks")
        return {"status": "synced", "backend": settings.backend}

    def _tracking_status(context: Context | None = None) -> dict[str, Any]:
        """Report whether Timewarrior is available and what it is tracking."""

        if tracking is None:
            return {
                "available": False,
                "enabled": False,
                "hook_installed": False,
                "active": False,
                "tags": [],
                "duration": None,
                "tracked_uuids": [],
                "setup_instructions": [],
            }
        status = tracking.status()
        _emit_log(context, "debug", "Read tracking status", extra={"active": status.active})
        return {
            "available": status.available,
            "enabled": status.enabled,
            "hook_installed": status.hook_installed,
            "active": status.active,
            "tags": status.tags,
            "duration": status.duration,
            "tracked_uuids": sorted(tracking.tracked_ids),
            "setup_instructions": tracking.setup_instructions(status),
        }

    tool_export = server.tool(
        name="export_report",
        description=(
            "Render a task report as a table. Provide a report name (default from settings), "
            "an optional filter such as 'status:pending +work limit:10', and an optional "
            "context filter. Returns labels, rows and per-row tracking flags."
        ),
    )(_export_report)

    tool_add = server.tool(
        name="add_task",
        description="Add a pending task with a description and optional attributes like 'project:home' or '+tag'.",
    )(_add_task)

    tool_complete = server.tool(
        name="complete_tasks",
        description="Mark the given task uuids as completed.",
    )(_complete_tasks)

    tool_delete = server.tool(
        name="delete_tasks",
        description="Delete the given task uuids.",
    )(_delete_tasks)

    tool_modify = server.tool(
        name="modify_tasks",
        description="Modify the given task uuids, e.g. 'project:work +urgent due:2025-01-31'.",
    )(_modify_tasks)

    tool_detail = server.tool(
        name="task_detail",
        description="Fetch all attributes of a single task by uuid.",
    )(_task_detail)

    tool_sync = server.tool(
        name="sync_tasks",
        description="Synchronize the task store with its configured server.",
    )(_sync_tasks)

    tool_tracking = server.tool(
        name="tracking_status",
        description=(
            "Show Timewarrior availability, hook installation, the active interval, "
            "tracked task uuids and setup instructions."
        ),
    )(_tracking_status)

    return ToolHandles(
        export_report=tool_export,
        add_task=tool_add,
        complete_tasks=tool_complete,
        delete_tasks=tool_delete,
        modify_tasks=tool_modify,
        task_detail=tool_detail,
        sync_tasks=tool_sync,
        tracking_status=tool_tracking,
    )


__all__ = ["ToolHandles", "register_tools"]
