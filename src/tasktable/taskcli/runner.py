"""Synchronous runner for external command-line tools."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .utils import sanitize_environment

logger = logging.getLogger(__name__)


class CommandNotFoundError(RuntimeError):
    """Raised when a required executable cannot be located."""


@dataclass(slots=True)
class ExecutionResult:
    """Holds the outcome of a single process invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Execute an external executable and capture its output.

    Every call blocks until the child process exits; there is no timeout.
    """

    program = "task"

    def __init__(self, executable: Path | str | None = None) -> None:
        self._executable_path = self._resolve_executable(executable)

    @classmethod
    def _resolve_executable(cls, explicit: Path | str | None) -> Path:
        if explicit is not None:
            candidate = Path(explicit)
            if candidate.exists() and candidate.is_file():
                return candidate
            raise CommandNotFoundError(f"{cls.program} executable not found at {candidate}")

        binary = shutil.which(cls.program)
        if binary is None:
            raise CommandNotFoundError(f"{cls.program} executable not found on PATH")
        return Path(binary)

    @property
    def executable(self) -> Path:
        return self._executable_path

    def run(self, *args: str) -> ExecutionResult:
        return self._invoke(*args)

    def _invoke(self, *args: str) -> ExecutionResult:
        cmd = [str(self._executable_path), *args]
        logger.debug("Running command: %s", cmd)
        process = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            env=sanitize_environment(),
        )
        stdout = process.stdout.decode("utf-8", errors="replace")
        stderr = process.stderr.decode("utf-8", errors="replace")
        return ExecutionResult(args=tuple(cmd), returncode=process.returncode, stdout=stdout, stderr=stderr)


class TaskCli(CommandRunner):
    """Runner for the Taskwarrior ``task`` executable."""

    program = "task"

    def version(self) -> ExecutionResult:
        return self._invoke("--version")


class FakeCommandRunner(CommandRunner):
    """Test double that replays canned results and records invocations."""

    def __init__(self, responses: Iterable[ExecutionResult] | None = None) -> None:  # type: ignore[override]
        self._responses = list(responses or [])
        self._invocations: list[tuple[str, ...]] = []
        self._executable_path = Path(f"/tmp/fake-{self.program}")

    def _invoke(self, *args: str) -> ExecutionResult:  # type: ignore[override]
        self._invocations.append(tuple(args))
        if self._responses:
            return self._responses.pop(0)
        return ExecutionResult(args=tuple(args), returncode=0, stdout="", stderr="")

    @property
    def invocations(self) -> list[tuple[str, ...]]:
        return self._invocations


class FakeTaskCli(FakeCommandRunner, TaskCli):
    """Fake ``task`` executable for tests."""


__all__ = [
    "CommandNotFoundError",
    "CommandRunner",
    "ExecutionResult",
    "FakeCommandRunner",
    "FakeTaskCli",
    "TaskCli",
]
