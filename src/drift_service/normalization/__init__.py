"""Normalization of raw Terraform plan JSON."""

from .resource_normalizer import ResourceNormalizer

__all__ = ["ResourceNormalizer"]
