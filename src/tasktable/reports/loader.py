"""Report definition loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol

import yaml
from pydantic import ValidationError

from .models import BUILTIN_REPORTS, ReportDefinition


class ReportLoadError(RuntimeError):
    """Raised when one or more report files cannot be parsed."""


class ReportConfigSource(Protocol):
    """Anything that can describe a report on its own, such as the task CLI."""

    def report_definition(self, name: str) -> ReportDefinition | None:
        ...


class ReportLoader:
    """Loads report definitions from YAML files on disk."""

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.exists()]

    @property
    def search_paths(self) -> list[Path]:
        """Return the normalized search paths."""

        return list(self._search_paths)

    def load_all(self) -> dict[str, ReportDefinition]:
        """Load reports from all configured search paths.

        Later search paths override earlier ones when report names collide.
        """

        if not self._search_paths:
            return {}

        reports: dict[str, ReportDefinition] = {}
        errors: list[str] = []

        for base in self._search_paths:
            for path in sorted(base.glob("*.yml")) + sorted(base.glob("*.yaml")):
                try:
                    document = yaml.safe_load(path.read_text(encoding="utf-8"))
                except yaml.YAMLError as exc:  # pragma: no cover - library type
                    errors.append(f"Failed to parse YAML in {path}: {exc}")
                    continue

                if document is None:
                    continue

                try:
                    report = ReportDefinition.model_validate(document)
                except ValidationError as exc:
                    errors.append(f"Report validation error in {path}: {exc}")
                    continue

                reports[report.name] = report

        if errors:
            raise ReportLoadError("; ".join(errors))

        return reports

    def get(self, name: str) -> ReportDefinition | None:
        return self.load_all().get(name)


def resolve_report(
    name: str,
    *,
    loader: ReportLoader | None = None,
    source: ReportConfigSource | None = None,
) -> ReportDefinition:
    """Find the definition for ``name``.

    Report files win over the task source's own configuration, which wins over
    the built-in defaults.
    """

    if loader is not None:
        report = loader.get(name)
        if report is not None:
            return report

    if source is not None:
        report = source.report_definition(name)
        if report is not None:
            return report

    try:
        return BUILTIN_REPORTS[name]
    except KeyError as exc:
        raise ReportLoadError(f"Report '{name}' is not defined") from exc


__all__ = ["ReportConfigSource", "ReportLoadError", "ReportLoader", "resolve_report"]
