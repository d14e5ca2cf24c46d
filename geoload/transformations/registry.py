# =============================================================================
# Recipe Registry
# =============================================================================
# Builds the ordered list of enrichment steps applied to every dataset.
# =============================================================================

from typing import List, Optional

from geoload.models import RenameMapping

from .base import VectorStep
from .vector import DerivePuidStep, GeometryStatusStep, GeometryTypeStep, RenameFieldsStep

__all__ = ["RecipeRegistry"]


class RecipeRegistry:
    """
    Registry for enrichment recipes.

    Derived fields are built in and always computed before renaming, so a
    rename rule may rename a derived field (e.g. ``puid``).
    """

    @staticmethod
    def get_enrichment_recipe(mapping: Optional[RenameMapping] = None) -> List[VectorStep]:
        """
        Get the enrichment recipe for a dataset.

        Steps are instantiated fresh each time (no shared state).

        Args:
            mapping: Rename rules for the dataset; None or empty skips renaming

        Returns:
            List of VectorStep instances to execute in order
        """
        recipe: List[VectorStep] = [
            DerivePuidStep(),
            GeometryTypeStep(),
            GeometryStatusStep(),
        ]
        if mapping is not None and not mapping.is_empty:
            recipe.append(RenameFieldsStep(mapping))
        return recipe
