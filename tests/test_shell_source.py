from __future__ import annotations

import json

import pytest

from tasktable.errors import ExternalProcessFailure, RecordConversionFailure, TaskVersionError
from tasktable.sources import ShellTaskSource
from tasktable.sources.shell import BASE_FLAGS, MUTATION_FLAGS, decode_export
from tasktable.taskcli import ExecutionResult, FakeTaskCli

UUID_A = "6f1b8a4e-3c1e-4c55-9a6b-0f6d2a1e7b11"
UUID_B = "0a4c2d6e-8f10-4b12-a3c4-5e6f7a8b9c0d"


def ok(stdout: str = "") -> ExecutionResult:
    return ExecutionResult(args=("task",), returncode=0, stdout=stdout, stderr="")


def failed(stderr: str, returncode: int = 1) -> ExecutionResult:
    return ExecutionResult(args=("task",), returncode=returncode, stdout="", stderr=stderr)


def export_payload(*uuids: str) -> str:
    return json.dumps(
        [
            {"id": index + 1, "uuid": uuid, "description": f"task {index}", "status": "pending",
             "entry": "20240101T090000Z"}
            for index, uuid in enumerate(uuids)
        ]
    )


def test_version_is_probed_once() -> None:
    cli = FakeTaskCli([ok("task 2.6.2 (2022-10-19)\n")])

    source = ShellTaskSource(cli)

    assert source.version == (2, 6, 2)
    assert not source.supports_report_export
    assert cli.invocations == [("--version",)]


@pytest.mark.parametrize("response", [failed("boom"), ok("garbage\n")])
def test_version_failure_is_fatal(response: ExecutionResult) -> None:
    with pytest.raises(TaskVersionError):
        ShellTaskSource(FakeTaskCli([response]))


def test_export_on_modern_task_names_the_report() -> None:
    cli = FakeTaskCli([ok(export_payload(UUID_A, UUID_B))])
    source = ShellTaskSource(cli, version=(3, 1, 0))

    records = source.export("project:home", "next", "+work or +urgent")

    assert [str(record.uuid) for record in records] == [UUID_A, UUID_B]
    assert cli.invocations == [
        (
            *BASE_FLAGS,
            "rc.report.next.filter=project:home",
            "+work",
            "or",
            "+urgent",
            "export",
            "next",
        )
    ]


def test_export_on_old_task_wraps_context() -> None:
    cli = FakeTaskCli([ok("[]")])
    source = ShellTaskSource(cli, version=(2, 6, 2))

    assert source.export("", "list", "project:work") == []
    assert cli.invocations == [(*BASE_FLAGS, "(project:work)", "export")]


def test_export_failure_carries_stderr() -> None:
    cli = FakeTaskCli([failed("Unable to open data", returncode=2)])
    source = ShellTaskSource(cli, version=(3, 0, 0))

    with pytest.raises(ExternalProcessFailure) as excinfo:
        source.export("", "next")

    assert excinfo.value.returncode == 2
    assert "Unable to open data" in str(excinfo.value)


def test_mutations_build_commands() -> None:
    cli = FakeTaskCli()
    source = ShellTaskSource(cli, version=(3, 0, 0))

    source.add("Buy milk", ["project:home", "+errand"])
    source.mark_done([UUID_A, UUID_B])
    source.delete([UUID_A])
    source.modify([UUID_B], "project:work 'due:2024-02-01'")
    source.sync()

    assert cli.invocations == [
        (*BASE_FLAGS, "add", "Buy milk", "project:home", "+errand"),
        (*BASE_FLAGS, *MUTATION_FLAGS, UUID_A, UUID_B, "done"),
        (*BASE_FLAGS, *MUTATION_FLAGS, UUID_A, "delete"),
        (*BASE_FLAGS, *MUTATION_FLAGS, UUID_B, "modify", "project:work", "due:2024-02-01"),
        (*BASE_FLAGS, "sync"),
    ]


def test_mutations_without_uuids_do_nothing() -> None:
    cli = FakeTaskCli()
    source = ShellTaskSource(cli, version=(3, 0, 0))

    source.mark_done([])
    source.delete([])
    source.modify([], "+tag")

    assert cli.invocations == []


def test_mutation_failure_raises() -> None:
    cli = FakeTaskCli([failed("No tasks specified.")])
    source = ShellTaskSource(cli, version=(3, 0, 0))

    with pytest.raises(ExternalProcessFailure):
        source.mark_done([UUID_A])


def test_detail() -> None:
    cli = FakeTaskCli([ok(export_payload(UUID_A)), ok("[]"), failed("bad uuid")])
    source = ShellTaskSource(cli, version=(3, 0, 0))

    record = source.detail(UUID_A)

    assert record is not None and record.description == "task 0"
    assert source.detail(UUID_B) is None
    assert source.detail("nope") is None
    assert cli.invocations[0] == (*BASE_FLAGS, UUID_A, "export")


def test_report_definition_from_show_output() -> None:
    show = "\n".join(
        [
            "",
            "Config Variable              Value",
            "report.next.columns id,project,description.count",
            "report.next.description Most urgent tasks",
            "report.next.filter status:pending -WAITING limit:page",
            "report.next.labels ID,Proj,Description",
            "report.nextweek.columns id",
        ]
    )
    cli = FakeTaskCli([ok(show), ok("")])
    source = ShellTaskSource(cli, version=(3, 0, 0))

    report = source.report_definition("next")

    assert report is not None
    assert report.columns == ["id", "project", "description.count"]
    assert report.labels == ["ID", "Proj", "Description"]
    assert report.filter == "status:pending -WAITING limit:page"
    assert source.report_definition("missing") is None
    assert cli.invocations[0] == (*BASE_FLAGS, "show", "rc.defaultwidth=0", "report.next.")


def test_decode_export_edge_cases() -> None:
    assert decode_export("") == []
    single = decode_export(json.dumps({"uuid": UUID_A, "entry": "20240101T090000Z"}))
    assert len(single) == 1

    with pytest.raises(RecordConversionFailure):
        decode_export("{not json")
    with pytest.raises(RecordConversionFailure):
        decode_export('"text"')
    with pytest.raises(RecordConversionFailure):
        decode_export(json.dumps([{"uuid": UUID_A}]))
