"""tasktable diagnostics CLI."""

from __future__ import annotations

import argparse
import json

from tasktable.config import TaskTableSettings
from tasktable.errors import TaskTableError
from tasktable.reports import ReportLoader, ReportTable, resolve_report
from tasktable.sources import TaskSource, create_source
from tasktable.taskcli import CommandNotFoundError
from tasktable.tracking import TimewarriorClient, TrackingCache


def load_source(settings: TaskTableSettings, loader: ReportLoader | None = None) -> TaskSource:
    try:
        return create_source(settings, report_loader=loader)
    except (TaskTableError, CommandNotFoundError) as exc:
        print(f"Task source unavailable: {exc}")
        raise SystemExit(1)


def cmd_report(args: argparse.Namespace) -> None:
    settings = TaskTableSettings()
    loader = ReportLoader(settings.report_paths)
    source = load_source(settings, loader)
    name = args.name or settings.default_report
    try:
        definition = resolve_report(name, loader=loader, source=source)
        table = ReportTable(
            definition,
            description_width=settings.description_width,
            vague_precise=settings.vague_precise,
            duration_human_readable=settings.duration_human_readable,
        )
        effective_filter = args.filter or definition.filter or ""
        rows, labels = table.render(source.export(effective_filter, name, args.context))
    except TaskTableError as exc:
        print(f"Report failed: {exc}")
        raise SystemExit(1)

    if args.json:
        print(json.dumps({"report": name, "labels": labels, "rows": rows}, indent=2))
        return

    widths = [len(label) for label in labels]
    for row in rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]
    print("  ".join(label.ljust(width) for label, width in zip(labels, widths)).rstrip())
    for row in rows:
        print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip())


def cmd_detail(args: argparse.Namespace) -> None:
    settings = TaskTableSettings()
    source = load_source(settings)
    try:
        record = source.detail(args.uuid)
    except TaskTableError as exc:
        print(f"Detail failed: {exc}")
        raise SystemExit(1)
    if record is None:
        print(f"No task with uuid {args.uuid}")
        raise SystemExit(1)
    print(json.dumps(record.to_document(), indent=2))


def cmd_tracking(args: argparse.Namespace) -> None:
    settings = TaskTableSettings()
    cache = TrackingCache(
        TimewarriorClient.discover(settings.timew_path),
        enabled=settings.tracking_enabled,
        hooks_dir=settings.task_hooks_dir,
    )
    status = cache.status()
    payload = {
        "available": status.available,
        "enabled": status.enabled,
        "hook_installed": status.hook_installed,
        "active": status.active,
        "tags": status.tags,
        "duration": status.duration,
        "tracked_uuids": sorted(cache.refresh()),
        "setup_instructions": cache.setup_instructions(status),
    }
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="tasktable diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_report = sub.add_parser("report", help="Render a report table")
    p_report.add_argument("name", nargs="?", help="Report name (defaults to settings)")
    p_report.add_argument("--filter", default="", help="Extra filter, e.g. 'project:home limit:5'")
    p_report.add_argument("--context", default="", help="Context filter to apply")
    p_report.add_argument("--json", action="store_true", help="Output JSON")
    p_report.set_defaults(func=cmd_report)

    p_detail = sub.add_parser("detail", help="Show every attribute of one task")
    p_detail.add_argument("uuid")
    p_detail.set_defaults(func=cmd_detail)

    p_tracking = sub.add_parser("tracking", help="Show Timewarrior tracking state")
    p_tracking.set_defaults(func=cmd_tracking)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
