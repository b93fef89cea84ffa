from __future__ import annotations

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from tasktable.config import TaskTableSettings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("TASKTABLE_") or key in {"TASK_PATH", "TIMEW_PATH"}:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = TaskTableSettings()

    assert settings.backend == "shell"
    assert settings.default_report == "next"
    assert settings.description_width == 100
    assert settings.report_paths == (Path("reports"),)
    assert settings.tracking_enabled
    assert not settings.vague_precise


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TASKTABLE_BACKEND", "Embedded")
    monkeypatch.setenv("TASKTABLE_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKTABLE_REPORT_PATHS", os.pathsep.join(["one", "two"]))
    monkeypatch.setenv("TASKTABLE_DESCRIPTION_WIDTH", "40")
    monkeypatch.setenv("TASKTABLE_VAGUE_PRECISE", "true")

    settings = TaskTableSettings()

    assert settings.backend == "embedded"
    assert settings.log_level == "DEBUG"
    assert settings.report_paths == (Path("one"), Path("two"))
    assert settings.description_width == 40
    assert settings.vague_precise


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("TASKTABLE_BACKEND", "sqlite"),
        ("TASKTABLE_LOG_LEVEL", "chatty"),
        ("TASKTABLE_DESCRIPTION_WIDTH", "-1"),
    ],
)
def test_invalid_values(monkeypatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ValidationError):
        TaskTableSettings()


def test_get_settings_resolves_paths(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKTABLE_DATA_PATH", "data/db")

    settings = get_settings()

    assert settings.data_path == (tmp_path / "data" / "db").resolve()
    assert settings.report_paths == ((tmp_path / "reports").resolve(),)
    assert get_settings() is settings


def test_task_hooks_dir(monkeypatch, tmp_path: Path) -> None:
    assert TaskTableSettings().task_hooks_dir == Path("~/.task/hooks")

    monkeypatch.setenv("TASKTABLE_TASK_HOOKS_DIR", "hooks")

    assert get_settings().task_hooks_dir == (tmp_path / "hooks").resolve()
