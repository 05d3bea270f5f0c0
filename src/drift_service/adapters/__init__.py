"""Adapter layer package for plan ingestion and configuration file extraction."""

from .plan_loader import (
    BinaryPlanFormatError,
    InvalidPlanFormatError,
    MissingFormatVersionError,
    PlanLoader,
    PlanLoaderError,
    PlanNotFoundError,
    parse_plan_document,
)
from .version_extractor import CANONICAL_VERSION_FILE, ExtractionError, VersionExtractor

__all__ = [
    "BinaryPlanFormatError",
    "CANONICAL_VERSION_FILE",
    "ExtractionError",
    "InvalidPlanFormatError",
    "MissingFormatVersionError",
    "PlanLoader",
    "PlanLoaderError",
    "PlanNotFoundError",
    "VersionExtractor",
    "parse_plan_document",
]
