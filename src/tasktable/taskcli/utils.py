"""Utility helpers for the task CLI runner."""

from __future__ import annotations

import os
import re
from typing import Mapping

_SANITIZED_VARS = {
    "PYTHONHOME",
    "PYTHONPATH",
    "VIRTUAL_ENV",
    "PIP_RESPECT_VIRTUALENV",
}

_VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")


def sanitize_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a sanitized environment suitable for subprocess execution."""

    env = dict(os.environ)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    if additional:
        env.update(additional)
    return env


def parse_version(output: str) -> tuple[int, int, int] | None:
    """Parse ``task --version`` output.

    Accepts ``"task 2.6.2 (2022-10-19)"`` as well as a bare ``"3.4.1"``.
    Returns ``None`` when no version can be found on the first line.
    """

    lines = output.strip().splitlines()
    line = lines[0].strip() if lines else ""
    parts = line.split()
    if len(parts) > 1 and parts[0] == "task":
        candidate = parts[1]
    else:
        candidate = line
    match = _VERSION_PATTERN.match(candidate)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)
