"""Report renderers for drift reports, plan analyses and combined runs."""

from .combined_formatter import CombinedFormatter
from .drift_formatter import DriftReportFormatter, truncate_path
from .formats import (
    OutputFormat,
    ReportWriteError,
    UnsupportedFormatError,
    parse_output_format,
)
from .plan_formatter import PlanFormatter, sort_by_severity

__all__ = [
    "CombinedFormatter",
    "DriftReportFormatter",
    "OutputFormat",
    "PlanFormatter",
    "ReportWriteError",
    "UnsupportedFormatError",
    "parse_output_format",
    "sort_by_severity",
    "truncate_path",
]
