# =============================================================================
# Geometry Normalizer - Reprojection and WKB Encoding
# =============================================================================
# Reprojects feature geometries to WGS84 and encodes them as hex WKB for
# transport into the destination database.
# =============================================================================

import logging
from typing import Optional

import numpy as np
import shapely
import shapely.wkb as _swkb
from pyproj import CRS as ProjCRS
from pyproj import Transformer
from shapely.geometry.base import BaseGeometry

from geoload.errors import TransformError
from geoload.models import WGS84_CRS, FeatureSet

__all__ = ["GeometryNormalizer", "encode_wkb_hex", "decode_wkb_hex"]

logger = logging.getLogger(__name__)


def encode_wkb_hex(geometry: Optional[BaseGeometry]) -> Optional[str]:
    """
    Encode a geometry as an uppercase hex 2D OGC WKB string.

    Z and M values are dropped; geography columns are declared 2D and
    SQL Server only reads OGC WKB.

    Args:
        geometry: Shapely geometry or None

    Returns:
        Hex string, or None for a null geometry (never an empty string)
    """
    if geometry is None:
        return None
    return _swkb.dumps(geometry, hex=True, output_dimension=2)


def decode_wkb_hex(wkb_hex: Optional[str]) -> Optional[BaseGeometry]:
    """Decode a hex WKB string produced by encode_wkb_hex."""
    if wkb_hex is None:
        return None
    return _swkb.loads(wkb_hex, hex=True)


def _project(transformer: Transformer, coords: np.ndarray) -> np.ndarray:
    """Apply a pyproj transformer to an (N, 2) coordinate array."""
    x, y = transformer.transform(coords[:, 0], coords[:, 1])
    return np.column_stack([x, y])


class GeometryNormalizer:
    """
    Reprojection to the canonical WGS84 CRS and hex WKB encoding.

    The two operations are independent; the runner applies ``reproject``
    before enrichment and ``encode`` after it.

    Args:
        target_crs: Canonical CRS (default: "EPSG:4326")
        log: Logger-like object (logging.Logger or Dagster context.log)
    """

    def __init__(self, target_crs: str = WGS84_CRS, log=None):
        self.target_crs = target_crs
        self.log = log or logger

    def _same_crs(self, source_crs: str) -> bool:
        return ProjCRS.from_user_input(source_crs).equals(
            ProjCRS.from_user_input(self.target_crs), ignore_axis_order=True
        )

    def reproject(self, feature_set: FeatureSet) -> FeatureSet:
        """
        Reproject every geometry to the target CRS.

        A FeatureSet with no declared CRS is returned unchanged and a warning
        is logged; the target CRS is then only assumed downstream.

        Raises:
            TransformError: If the CRS is unknown or a geometry cannot be transformed
        """
        if feature_set.crs is None:
            self.log.warning(
                f" - No CRS declared for {feature_set.dataset_id}; assuming {self.target_crs}."
            )
            return feature_set

        try:
            if self._same_crs(feature_set.crs):
                self.log.info(f" - CRS already {self.target_crs}.")
                return feature_set.with_features(feature_set.features, crs=self.target_crs)

            transformer = Transformer.from_crs(feature_set.crs, self.target_crs, always_xy=True)
            features = [
                feature.with_geometry(
                    None
                    if feature.geometry is None
                    else shapely.transform(
                        feature.geometry, lambda coords: _project(transformer, coords)
                    )
                )
                for feature in feature_set.features
            ]
        except Exception as e:
            raise TransformError(
                f"Reprojection from {feature_set.crs} to {self.target_crs} failed: {e}"
            ) from e

        self.log.info(
            f" - Reprojected {len(features)} feature(s) from {feature_set.crs} to {self.target_crs}."
        )
        return feature_set.with_features(features, crs=self.target_crs)

    def encode(self, feature_set: FeatureSet) -> FeatureSet:
        """
        Attach hex WKB to every feature as its transient ``wkb_hex`` value.

        Raises:
            TransformError: If a geometry cannot be encoded
        """
        try:
            features = [
                feature.with_wkb_hex(encode_wkb_hex(feature.geometry))
                for feature in feature_set.features
            ]
        except Exception as e:
            raise TransformError(f"WKB encoding failed for {feature_set.dataset_id}: {e}") from e

        null_count = sum(1 for f in features if f.wkb_hex is None)
        self.log.info(
            f" - Encoded {len(features) - null_count} geometries as WKB ({null_count} null)."
        )
        return feature_set.with_features(features)
