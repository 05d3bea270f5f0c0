"""Critical resource rules used to score plan changes."""

from .critical_resources import (
    DEFAULT_CRITICAL_RESOURCES,
    CriticalResourceRegistry,
    merge_critical_resources,
)

__all__ = [
    "CriticalResourceRegistry",
    "DEFAULT_CRITICAL_RESOURCES",
    "merge_critical_resources",
]
