# =============================================================================
# Attribute Enricher
# =============================================================================
# Runs the enrichment recipe (derived fields, then renaming) on a FeatureSet.
# =============================================================================

import logging
from typing import Optional

from geoload.models import FeatureSet, RenameMapping

from .registry import RecipeRegistry

__all__ = ["AttributeEnricher"]

logger = logging.getLogger(__name__)


class AttributeEnricher:
    """
    Computes derived fields and applies renaming.

    Example:
        >>> enriched = AttributeEnricher().enrich(feature_set, mapping)
    """

    def __init__(self, log=None):
        self.log = log or logger

    def enrich(self, feature_set: FeatureSet, mapping: Optional[RenameMapping] = None) -> FeatureSet:
        """
        Apply derived fields then renaming to every feature.

        Args:
            feature_set: Loaded (and reprojected) features
            mapping: Rename rules for the dataset

        Returns:
            New, enriched FeatureSet

        Raises:
            TransformError: If any step fails; the whole file is aborted
        """
        for step in RecipeRegistry.get_enrichment_recipe(mapping):
            feature_set = step.apply(feature_set, self.log)
        return feature_set
