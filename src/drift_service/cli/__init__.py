"""Command-line interface package for drift analysis."""

from .app import build_parser, create_service, main, run

__all__ = ["build_parser", "create_service", "main", "run"]
