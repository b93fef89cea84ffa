"""Report definitions, cell formatting and table simplification."""

from .formatting import format_date, format_duration, truncate_to_width, vague_duration
from .loader import ReportLoadError, ReportLoader, resolve_report
from .models import BUILTIN_REPORTS, ReportDefinition
from .table import VIRTUAL_TAGS, ReportTable, simplify_table

__all__ = [
    "BUILTIN_REPORTS",
    "ReportDefinition",
    "ReportLoadError",
    "ReportLoader",
    "ReportTable",
    "VIRTUAL_TAGS",
    "format_date",
    "format_duration",
    "resolve_report",
    "simplify_table",
    "truncate_to_width",
    "vague_duration",
]
