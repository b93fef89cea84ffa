from __future__ import annotations

from tasktable.config import TaskTableSettings
from tasktable.server import create_server
from tasktable.sources import ShellTaskSource
from tasktable.taskcli import FakeTaskCli
from tasktable.tracking import HOOK_NAME, TimewarriorClient, TrackingCache


def test_create_server_with_shell_source() -> None:
    cli = FakeTaskCli()
    source = ShellTaskSource(cli, version=(3, 1, 0))
    tracking = TrackingCache(TimewarriorClient(None))

    server = create_server(TaskTableSettings(), source=source, tracking=tracking)

    assert getattr(server, "task_source") is source
    assert getattr(server, "tracking_cache") is tracking
    assert getattr(server, "source_metadata") == {
        "backend": "shell",
        "type": "ShellTaskSource",
        "version": "3.1.0",
    }
    handles = getattr(server, "tool_handles")
    assert handles.export_report is not None
    assert handles.tracking_status is not None


def test_create_server_builds_tracking_from_settings(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TASKTABLE_TRACKING_ENABLED", "false")
    monkeypatch.setenv("TIMEW_PATH", str(tmp_path / "no-timew"))
    source = ShellTaskSource(FakeTaskCli(), version=(2, 6, 2))

    server = create_server(TaskTableSettings(), source=source)

    tracking = getattr(server, "tracking_cache")
    assert not tracking.enabled
    assert tracking.status().available is False


def test_create_server_passes_hooks_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TIMEW_PATH", str(tmp_path / "no-timew"))
    monkeypatch.setenv("TASKTABLE_TASK_HOOKS_DIR", str(tmp_path))
    (tmp_path / HOOK_NAME).write_text("#!/bin/sh\n")
    source = ShellTaskSource(FakeTaskCli(), version=(3, 1, 0))

    server = create_server(TaskTableSettings(), source=source)

    tracking = getattr(server, "tracking_cache")
    assert tracking.hooks_dir == tmp_path
    assert tracking.status().hook_installed
