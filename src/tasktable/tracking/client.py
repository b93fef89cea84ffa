"""Read-only access to the Timewarrior ``timew`` executable."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from ..taskcli import CommandNotFoundError, CommandRunner, ExecutionResult, FakeCommandRunner

logger = logging.getLogger(__name__)


class TimewarriorError(RuntimeError):
    """Raised when a ``timew`` query fails."""


class TimewCli(CommandRunner):
    """Runner for the ``timew`` executable."""

    program = "timew"


class FakeTimewCli(FakeCommandRunner, TimewCli):
    """Fake ``timew`` executable for tests."""


class TimewarriorClient:
    """Query Timewarrior's DOM for the interval that is currently open."""

    def __init__(self, runner: CommandRunner | None) -> None:
        self._runner = runner
        self._available: bool | None = None

    @classmethod
    def discover(cls, executable: Path | str | None = None) -> "TimewarriorClient":
        """Locate ``timew``; a missing binary yields a client that is never available."""

        try:
            runner: CommandRunner | None = TimewCli(executable)
        except CommandNotFoundError as exc:
            logger.info("Timewarrior integration unavailable: %s", exc)
            runner = None
        return cls(runner)

    def available(self) -> bool:
        """Return whether ``timew --version`` succeeds; probed once per client."""

        if self._available is None:
            if self._runner is None:
                self._available = False
            else:
                try:
                    self._available = self._runner.run("--version").ok
                except OSError as exc:
                    logger.warning("Unable to run timew: %s", exc)
                    self._available = False
        return self._available

    def _get(self, key: str) -> str:
        if self._runner is None:
            raise TimewarriorError("timew executable is not available")
        result: ExecutionResult = self._runner.run("get", key)
        if not result.ok:
            raise TimewarriorError(f"timew get {key} failed: {result.stderr.strip()}")
        return result.stdout.strip()

    def is_active(self) -> bool:
        return self._get("dom.active") == "1"

    def active_tags(self) -> list[str]:
        raw = self._get("dom.active.tags")
        try:
            return shlex.split(raw)
        except ValueError:
            return raw.split()

    def active_duration(self) -> str:
        return self._get("dom.active.duration")


__all__ = ["FakeTimewCli", "TimewCli", "TimewarriorClient", "TimewarriorError"]
