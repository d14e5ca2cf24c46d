# =============================================================================
# Transformations Library
# =============================================================================
# Recipe-based attribute enrichment for the loader.
# =============================================================================

"""
Transformations library for the loader.

This library provides:
- TransformStep: Base class for all transformation steps
- VectorStep: Base class for per-feature attribute steps
- Vector steps: DerivePuidStep, GeometryTypeStep, GeometryStatusStep, RenameFieldsStep
- RecipeRegistry: Ordered enrichment recipe
- AttributeEnricher: Runs the recipe against a FeatureSet
"""

from .base import TransformStep, VectorStep
from .vector import (
    UNKNOWN,
    DerivePuidStep,
    GeometryStatusStep,
    GeometryTypeStep,
    RenameFieldsStep,
)
from .registry import RecipeRegistry
from .enricher import AttributeEnricher

__all__ = [
    "TransformStep",
    "VectorStep",
    "UNKNOWN",
    "DerivePuidStep",
    "GeometryStatusStep",
    "GeometryTypeStep",
    "RenameFieldsStep",
    "RecipeRegistry",
    "AttributeEnricher",
]
