"""Short-lived cache of the task uuids Timewarrior is tracking."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable
from uuid import UUID

from .client import TimewarriorClient, TimewarriorError

logger = logging.getLogger(__name__)

DEFAULT_TTL = 5.0
UUID_TAG_PREFIX = "uuid:"
HOOK_NAME = "on-modify.timewarrior"
DEFAULT_HOOKS_DIR = Path("~/.task/hooks")


@dataclass(frozen=True, slots=True)
class TrackingCacheEntry:
    tracked: frozenset[str]
    refreshed_at: float


@dataclass(slots=True)
class TrackingStatus:
    """Snapshot of the Timewarrior integration state."""

    available: bool
    enabled: bool
    hook_installed: bool = False
    active: bool = False
    tags: list[str] = field(default_factory=list)
    duration: str | None = None


def extract_tracked_ids(tags: list[str]) -> frozenset[str]:
    return frozenset(tag[len(UUID_TAG_PREFIX):] for tag in tags if tag.startswith(UUID_TAG_PREFIX))


class TrackingCache:
    """Answer "is this task being tracked" with at most one query per TTL window.

    ``refresh`` replaces the cached set and timestamp together; failures leave
    an empty set behind instead of raising.
    """

    def __init__(
        self,
        client: TimewarriorClient,
        *,
        enabled: bool = True,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
        hooks_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._enabled = enabled
        self._ttl = ttl
        self._clock = clock
        self._hooks_dir = (hooks_dir or DEFAULT_HOOKS_DIR).expanduser()
        self._entry: TrackingCacheEntry | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def hooks_dir(self) -> Path:
        return self._hooks_dir

    @property
    def tracked_ids(self) -> frozenset[str]:
        entry = self._entry
        return entry.tracked if entry is not None else frozenset()

    def _active(self) -> bool:
        return self._enabled and self._client.available()

    def _is_expired_locked(self) -> bool:
        if self._entry is None:
            return True
        return self._clock() - self._entry.refreshed_at > self._ttl

    def is_expired(self) -> bool:
        with self._lock:
            return self._is_expired_locked()

    def _refresh_locked(self) -> TrackingCacheEntry:
        tracked: frozenset[str] = frozenset()
        if self._active():
            try:
                if self._client.is_active():
                    tracked = extract_tracked_ids(self._client.active_tags())
            except (TimewarriorError, OSError) as exc:
                logger.warning("Failed to refresh Timewarrior tracking cache: %s", exc)
                tracked = frozenset()
        self._entry = TrackingCacheEntry(tracked=tracked, refreshed_at=self._clock())
        return self._entry

    def refresh(self) -> frozenset[str]:
        """Query Timewarrior now, regardless of the TTL."""

        with self._lock:
            return self._refresh_locked().tracked

    def force_refresh(self) -> frozenset[str]:
        return self.refresh()

    def get(self, uuid: UUID | str) -> bool:
        """Answer from the cached set without refreshing it."""

        return str(uuid) in self.tracked_ids

    def is_tracked(self, uuid: UUID | str) -> bool:
        if not self._active():
            return False
        with self._lock:
            entry = self._entry
            if entry is None or self._is_expired_locked():
                entry = self._refresh_locked()
            return str(uuid) in entry.tracked

    def hook_installed(self) -> bool:
        """Whether Taskwarrior's ``on-modify.timewarrior`` hook is present."""

        return (self._hooks_dir / HOOK_NAME).is_file()

    def status(self) -> TrackingStatus:
        available = self._client.available()
        status = TrackingStatus(
            available=available, enabled=self._enabled, hook_installed=self.hook_installed()
        )
        if not available:
            return status
        try:
            status.active = self._client.is_active()
            if status.active:
                status.tags = self._client.active_tags()
                status.duration = self._client.active_duration()
        except (TimewarriorError, OSError) as exc:
            logger.warning("Failed to read Timewarrior status: %s", exc)
        return status

    def setup_instructions(self, status: TrackingStatus | None = None) -> list[str]:
        """Human-readable checklist for getting the integration working."""

        if status is None:
            status = self.status()
        lines: list[str] = []
        if status.available:
            lines.append("Timewarrior: found and available")
        else:
            lines.extend(
                [
                    "Timewarrior: not found",
                    "  Install with: sudo apt install timewarrior (or yum)",
                    "  macOS: brew install timewarrior",
                    "  Other platforms: https://timewarrior.net/download/",
                ]
            )
        if status.hook_installed:
            lines.append("Taskwarrior hook: installed")
        else:
            lines.append(f"Taskwarrior hook: not installed ({self._hooks_dir / HOOK_NAME})")
            lines.append("  Run the hook installation command to enable integration")
        if status.enabled:
            lines.append("Integration: enabled")
        else:
            lines.append("Integration: disabled")
            lines.append("  Set TASKTABLE_TRACKING_ENABLED=true to enable it")
        return lines


__all__ = [
    "DEFAULT_HOOKS_DIR",
    "DEFAULT_TTL",
    "HOOK_NAME",
    "TrackingCache",
    "TrackingCacheEntry",
    "TrackingStatus",
    "extract_tracked_ids",
]
