"""Output formats shared by the report formatters."""

from __future__ import annotations

from enum import Enum
from typing import TextIO


class OutputFormat(str, Enum):
    """Supported renderings of a report."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"


class UnsupportedFormatError(ValueError):
    """Raised when a requested output format is not one of :class:`OutputFormat`."""


class ReportWriteError(RuntimeError):
    """Raised when a rendered report cannot be written to its destination."""


def parse_output_format(token: str | OutputFormat) -> OutputFormat:
    if isinstance(token, OutputFormat):
        return token
    try:
        return OutputFormat(str(token).strip().lower())
    except ValueError as exc:
        choices = ", ".join(fmt.value for fmt in OutputFormat)
        raise UnsupportedFormatError(
            f"unsupported format: {token} (expected one of: {choices})"
        ) from exc


def write_output(sink: TextIO, content: str) -> None:
    """Write a fully rendered report to ``sink`` in a single call."""

    try:
        sink.write(content)
        sink.flush()
    except OSError as exc:
        raise ReportWriteError(f"Failed to write report: {exc}") from exc


__all__ = [
    "OutputFormat",
    "ReportWriteError",
    "UnsupportedFormatError",
    "parse_output_format",
    "write_output",
]
