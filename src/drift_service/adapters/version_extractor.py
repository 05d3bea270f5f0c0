"""Extract declared Terraform and provider version constraints from a file tree."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

import hcl2
from lark.exceptions import LarkError

from ..models import ProviderConstraint, VersionRecord

logger = logging.getLogger(__name__)

CANONICAL_VERSION_FILE = "versions.tf"
TERRAFORM_EXTENSION = ".tf"


class ExtractionError(RuntimeError):
    """Raised when the directory tree cannot be traversed."""


class VersionExtractor:
    """Walk a directory tree and collect one :class:`VersionRecord` per relevant file."""

    def __init__(self, root: str | os.PathLike[str] = ".") -> None:
        self.root = Path(root).expanduser()

    def scan(self) -> List[VersionRecord]:
        """Return version records in deterministic traversal order."""

        if not self.root.exists():
            raise ExtractionError(f"Scan path does not exist: {self.root}")
        if not self.root.is_dir():
            raise ExtractionError(f"Scan path is not a directory: {self.root}")

        records: List[VersionRecord] = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=self._raise_walk_error):
            # Hidden directories are pruned; the root itself is never in ``dirnames``.
            dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
            records.extend(self._scan_directory(Path(dirpath), filenames))

        logger.debug("Extracted %d version records under %s", len(records), self.root)
        return records

    # ------------------------------------------------------------------
    def _scan_directory(self, directory: Path, filenames: Iterable[str]) -> List[VersionRecord]:
        candidates = sorted(name for name in filenames if name.endswith(TERRAFORM_EXTENSION))
        if CANONICAL_VERSION_FILE in candidates:
            candidates.remove(CANONICAL_VERSION_FILE)
            candidates.insert(0, CANONICAL_VERSION_FILE)

        records: List[VersionRecord] = []
        for name in candidates:
            record = self.extract_file(directory / name)
            if record is None:
                continue
            records.append(record)
            if not record.failed:
                # First file with version data owns the directory.
                break
        return records

    def extract_file(self, path: Path) -> Optional[VersionRecord]:
        """Parse one file; ``None`` means it declares no version constraints."""

        relative = self._relative_path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Unable to read %s: %s", relative, exc)
            return VersionRecord.from_error(relative, f"failed to read file: {exc}")

        try:
            document = hcl2.loads(content)
        except (LarkError, ValueError) as exc:
            logger.debug("Unable to parse %s: %s", relative, exc)
            return VersionRecord.from_error(relative, f"HCL parsing failed: {exc}")

        record = VersionRecord(file_path=relative)
        for block in _as_blocks(document.get("terraform")):
            self._extract_terraform_block(block, record)

        if not record.has_versions:
            return None
        return record

    # ------------------------------------------------------------------
    def _extract_terraform_block(self, block: Mapping[str, Any], record: VersionRecord) -> None:
        required_version = _unquote(block.get("required_version"))
        if required_version:
            record.terraform_version = required_version

        for providers_block in _as_blocks(block.get("required_providers")):
            for name, value in providers_block.items():
                # Legacy ``aws = "~> 3.0"`` shorthand carries no source and is ignored.
                if not isinstance(value, Mapping):
                    continue
                constraint = ProviderConstraint(
                    source=_unquote(value.get("source")),
                    version=_unquote(value.get("version")),
                )
                if constraint.source or constraint.version:
                    record.providers[_unquote(name)] = constraint

    def _relative_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    @staticmethod
    def _raise_walk_error(error: OSError) -> None:
        raise ExtractionError(f"Failed to traverse {error.filename}: {error.strerror}") from error


def _as_blocks(value: Any) -> List[Mapping[str, Any]]:
    """Normalize an HCL block value, which the parser returns as a list of mappings."""

    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, Mapping)]
    return []


def _unquote(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    text = value.strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1]
    return text


__all__ = ["CANONICAL_VERSION_FILE", "ExtractionError", "VersionExtractor"]
