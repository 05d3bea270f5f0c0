"""Load and validate Terraform plan JSON documents."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from ..models import PlanDocument
from ..normalization import ResourceNormalizer

logger = logging.getLogger(__name__)

HEADER_BUFFER_SIZE = 128
_UTF8_BOM = b"\xef\xbb\xbf"
_JSON_WHITESPACE = b" \t\r\n"


class PlanLoaderError(RuntimeError):
    """Exception raised when terraform plan ingestion fails."""


class PlanNotFoundError(PlanLoaderError):
    """The plan file does not exist."""


class BinaryPlanFormatError(PlanLoaderError):
    """The plan file is the binary ``terraform plan -out`` artifact, not its JSON rendering."""


class InvalidPlanFormatError(PlanLoaderError):
    """The plan file is not valid JSON."""


class MissingFormatVersionError(PlanLoaderError):
    """The JSON document lacks ``format_version`` and is not a recognized plan file."""


class PlanLoader:
    """Read a plan exported with ``terraform show -json`` into a :class:`PlanDocument`."""

    def __init__(
        self,
        plan_json_path: str | os.PathLike[str],
        *,
        normalizer: ResourceNormalizer | None = None,
    ) -> None:
        self.plan_json_path = Path(plan_json_path).expanduser()
        self.normalizer = normalizer or ResourceNormalizer()

    def load_plan(self) -> PlanDocument:
        """Load, validate and normalize the plan artifact."""

        path = self.plan_json_path
        if not path.exists():
            raise PlanNotFoundError(f"Terraform plan JSON artifact not found: {path}")

        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise PlanLoaderError(f"Failed to read plan file {path}") from exc

        logger.debug("Read %d bytes from plan file %s", len(raw), path)
        return parse_plan_document(raw, source=str(path), normalizer=self.normalizer)


def parse_plan_document(
    raw: bytes,
    *,
    source: str = "plan.json",
    normalizer: ResourceNormalizer | None = None,
) -> PlanDocument:
    """Validate raw plan bytes and return the normalized document."""

    _check_binary_format(raw, source)

    try:
        data: Any = json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidPlanFormatError(
            f"invalid plan file format: {exc}. Ensure {source} is valid Terraform plan JSON"
        ) from exc

    if not isinstance(data, dict) or not data.get("format_version"):
        raise MissingFormatVersionError(
            f"invalid plan file: missing format_version. {source} may not be a Terraform plan JSON file"
        )

    try:
        return (normalizer or ResourceNormalizer()).normalize(data)
    except ValueError as exc:
        raise InvalidPlanFormatError(f"invalid plan file format: {exc} in {source}") from exc


def _check_binary_format(raw: bytes, source: str) -> None:
    header = raw[:HEADER_BUFFER_SIZE]
    if header.startswith(_UTF8_BOM):
        header = header[len(_UTF8_BOM):]

    for byte in header:
        if byte in _JSON_WHITESPACE:
            continue
        if byte != ord("{"):
            raise BinaryPlanFormatError(
                "plan file is in binary format. Convert to JSON with: "
                f"terraform show -json {source} > plan.json"
            )
        break


__all__ = [
    "BinaryPlanFormatError",
    "InvalidPlanFormatError",
    "MissingFormatVersionError",
    "PlanLoader",
    "PlanLoaderError",
    "PlanNotFoundError",
    "parse_plan_document",
]
