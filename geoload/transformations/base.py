# =============================================================================
# Base Classes for Transformation Steps
# =============================================================================
# Abstract base classes for attribute enrichment steps.
# =============================================================================

import logging
from abc import ABC, abstractmethod

from geoload.errors import GeoLoadError, TransformError
from geoload.models import FeatureSet

__all__ = ["TransformStep", "VectorStep"]

logger = logging.getLogger(__name__)


class TransformStep(ABC):
    """
    Base class for all transformation steps.

    Steps take a FeatureSet and return a new FeatureSet; inputs are never
    mutated. Any exception raised while transforming is re-raised as a
    TransformError so the whole file fails as a unit.
    """

    name: str = "transform"

    def apply(self, feature_set: FeatureSet, log=None) -> FeatureSet:
        """
        Run the step.

        Args:
            feature_set: Input features
            log: Logger-like object (logging.Logger or Dagster context.log)

        Returns:
            New FeatureSet

        Raises:
            TransformError: If the step fails for any feature
        """
        log = log or logger
        try:
            return self.transform(feature_set, log)
        except GeoLoadError:
            raise
        except Exception as e:
            raise TransformError(
                f"Step '{self.name}' failed for {feature_set.dataset_id}: {e}"
            ) from e

    @abstractmethod
    def transform(self, feature_set: FeatureSet, log) -> FeatureSet:
        """Produce the transformed FeatureSet. Emits one summary log line."""


class VectorStep(TransformStep):
    """
    Base class for per-feature attribute steps.

    Marker class for type hints; recipes are lists of VectorStep.
    """
    pass
