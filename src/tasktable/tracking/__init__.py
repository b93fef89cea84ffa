"""Timewarrior tracking integration."""

from .cache import (
    DEFAULT_TTL,
    HOOK_NAME,
    TrackingCache,
    TrackingCacheEntry,
    TrackingStatus,
    extract_tracked_ids,
)
from .client import FakeTimewCli, TimewCli, TimewarriorClient, TimewarriorError

__all__ = [
    "DEFAULT_TTL",
    "FakeTimewCli",
    "HOOK_NAME",
    "TimewCli",
    "TimewarriorClient",
    "TimewarriorError",
    "TrackingCache",
    "TrackingCacheEntry",
    "TrackingStatus",
    "extract_tracked_ids",
]
