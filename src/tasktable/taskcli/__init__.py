"""External command orchestration utilities."""

from .runner import (
    CommandNotFoundError,
    CommandRunner,
    ExecutionResult,
    FakeCommandRunner,
    FakeTaskCli,
    TaskCli,
)
from .utils import parse_version, sanitize_environment

__all__ = [
    "CommandNotFoundError",
    "CommandRunner",
    "ExecutionResult",
    "FakeCommandRunner",
    "FakeTaskCli",
    "TaskCli",
    "parse_version",
    "sanitize_environment",
]
