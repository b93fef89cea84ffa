"""FastMCP server bootstrap for tasktable."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fastmcp import Context, FastMCP

from . import __version__
from .config import TaskTableSettings, get_settings
from .reports import ReportLoadError, ReportLoader
from .sources import ShellTaskSource, TaskSource, create_source
from .tools import register_tools
from .tracking import TimewarriorClient, TrackingCache


def configure_logging(level: str) -> None:
    """Configure root logging for the tasktable server."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def create_server(
    settings: Optional[TaskTableSettings] = None,
    source: TaskSource | None = None,
    tracking: TrackingCache | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server with its tools and status resource."""

    settings = settings or get_settings()

    report_loader = ReportLoader(settings.report_paths)

    if source is None:
        source = create_source(settings, report_loader=report_loader)

    source_metadata: dict[str, Any] = {
        "backend": settings.backend,
        "type": type(source).__name__,
        "version": None,
    }
    if isinstance(source, ShellTaskSource):
        source_metadata["version"] = ".".join(str(part) for part in source.version)

    if tracking is None:
        tracking = TrackingCache(
            TimewarriorClient.discover(settings.timew_path),
            enabled=settings.tracking_enabled,
            hooks_dir=settings.task_hooks_dir,
        )

    server = FastMCP(
        name="tasktable",
        version=__version__,
        instructions=(
            "tasktable renders Taskwarrior reports as tables and manages tasks. "
            "Use export_report to list tasks, then add, modify, complete or delete "
            "them by uuid."
        ),
    )

    handles = register_tools(
        server,
        settings=settings,
        source=source,
        tracking=tracking,
        report_loader=report_loader,
    )

    @server.resource(
        "resource://tasktable/status",
        name="tasktable_status",
        description="Provides the current runtime status for the tasktable server.",
        mime_type="application/json",
        tags={"status", "health"},
    )
    def status_resource(context: Context) -> str:
        """Return a JSON string summarizing basic runtime state."""

        try:
            reports = sorted(report_loader.load_all().keys())
            report_error: str | None = None
        except ReportLoadError as exc:
            reports = []
            report_error = str(exc)

        tracking_status = tracking.status()

        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server_version": __version__,
            "log_level": settings.log_level,
            "source": source_metadata,
            "reports": {
                "default": settings.default_report,
                "configured": reports,
                "search_paths": [str(path) for path in settings.report_paths],
                "error": report_error,
            },
            "tracking": {
                "enabled": tracking_status.enabled,
                "available": tracking_status.available,
                "hook_installed": tracking_status.hook_installed,
                "active": tracking_status.active,
                "tracked_count": len(tracking.tracked_ids),
            },
            "request_id": getattr(context, "request_id", None),
        }
        return json.dumps(payload)

    setattr(server, "report_loader", report_loader)
    setattr(server, "task_source", source)
    setattr(server, "source_metadata", source_metadata)
    setattr(server, "tracking_cache", tracking)
    setattr(server, "tool_handles", handles)
    return server


def main() -> None:
    """Entry point for running the tasktable MCP server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching tasktable MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "backend": settings.backend,
            "tracking_enabled": settings.tracking_enabled,
        },
    )
    server.run()


if __name__ == "__main__":
    main()
