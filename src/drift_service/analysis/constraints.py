"""Constraint-aware comparison of Terraform version strings."""

from __future__ import annotations

import re
from typing import Optional, Tuple

from ..models import DriftStatus

_OPERATOR_PREFIX = re.compile(r"^[~>=<!\s]+")


def extract_major_minor(constraint: str) -> Tuple[Optional[int], Optional[int]]:
    """Return the leading major and minor numbers of ``constraint``.

    Operators such as ``~>``, ``>=`` or ``=`` are stripped first. A component
    that is missing or not an integer is returned as ``None``.

    >>> extract_major_minor("~> 1.13")
    (1, 13)
    >>> extract_major_minor(">= 5")
    (5, None)
    """

    version = _OPERATOR_PREFIX.sub("", constraint.strip())
    parts = version.split(".")
    minor = _to_int(parts[1]) if len(parts) > 1 else None
    return _to_int(parts[0]), minor


def compare_constraints(expected: str, actual: str, *, managed: bool = True) -> DriftStatus:
    """Classify the drift between an expected and a declared constraint.

    ``managed=False`` is the provider context where the baseline may have no
    opinion: an empty ``expected`` then means :attr:`DriftStatus.NOT_MANAGED`.
    An unparseable major version always yields :attr:`DriftStatus.MAJOR_DRIFT`.
    """

    if not managed and not expected:
        return DriftStatus.NOT_MANAGED
    if not actual:
        return DriftStatus.MISSING
    if expected == actual:
        return DriftStatus.IN_SYNC

    expected_major, _ = extract_major_minor(expected)
    actual_major, _ = extract_major_minor(actual)

    if expected_major is None or actual_major is None:
        return DriftStatus.MAJOR_DRIFT
    if expected_major != actual_major:
        return DriftStatus.MAJOR_DRIFT
    # Same major: a different minor or only a different operator spelling.
    return DriftStatus.MINOR_DRIFT


def _to_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


__all__ = ["compare_constraints", "extract_major_minor"]
