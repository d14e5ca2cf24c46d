# =============================================================================
# Feature Models
# =============================================================================
# In-memory representation of one dataset's records:
# - ValueKind / classify_value: Tagged view over loosely-typed attribute values
# - Feature: Attributes + immutable geometry (+ transient WKB hex)
# - FeatureSet: Ordered features + source CRS
# =============================================================================

import math
import numbers
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from shapely.geometry.base import BaseGeometry

from .spatial import validate_crs

__all__ = ["ValueKind", "classify_value", "Feature", "FeatureSet"]


class ValueKind(str, Enum):
    """Discriminator for attribute values."""

    NULL = "null"
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"


def classify_value(value: Any) -> ValueKind:
    """
    Classify an attribute value into its ValueKind.

    Booleans are checked before integers because ``bool`` is an ``int``
    subclass. NaN floats count as NULL.

    Args:
        value: Attribute value as read from a vector file

    Returns:
        ValueKind of the value

    Example:
        >>> classify_value(True)
        <ValueKind.BOOLEAN: 'boolean'>
        >>> classify_value(float("nan"))
        <ValueKind.NULL: 'null'>
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, numbers.Integral):
        return ValueKind.INTEGER
    if isinstance(value, float) and math.isnan(value):
        return ValueKind.NULL
    if isinstance(value, (numbers.Real, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, (datetime, date)):
        return ValueKind.TIMESTAMP
    return ValueKind.STRING


class Feature(BaseModel):
    """
    One spatial record.

    Features are immutable; transformations return new instances via the
    ``with_*`` helpers.

    Attributes:
        attributes: Field name → value
        geometry: Shapely geometry, or None
        wkb_hex: Transient hex-encoded WKB, set by GeometryNormalizer.encode
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    attributes: Dict[str, Any] = Field(default_factory=dict)
    geometry: Optional[BaseGeometry] = None
    wkb_hex: Optional[str] = None

    def with_attributes(self, attributes: Dict[str, Any]) -> "Feature":
        return self.model_copy(update={"attributes": dict(attributes)})

    def with_geometry(self, geometry: Optional[BaseGeometry]) -> "Feature":
        return self.model_copy(update={"geometry": geometry, "wkb_hex": None})

    def with_wkb_hex(self, wkb_hex: Optional[str]) -> "Feature":
        return self.model_copy(update={"wkb_hex": wkb_hex})


class FeatureSet(BaseModel):
    """
    Ordered collection of features loaded from one input file.

    Attributes:
        dataset_id: File base name without extension
        features: Features in file order
        crs: Source coordinate reference identifier (e.g. "EPSG:2193"), if declared
        source_path: Path the features were read from
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    dataset_id: str
    features: List[Feature] = Field(default_factory=list)
    crs: Optional[str] = None
    source_path: Optional[str] = None

    @field_validator("crs")
    @classmethod
    def normalize_crs(cls, v: Optional[str]) -> Optional[str]:
        """Normalize a declared CRS; None means the source declared none."""
        if v is None:
            return None
        return validate_crs(v)

    def __len__(self) -> int:
        return len(self.features)

    def schema_keys(self) -> List[str]:
        """Union of attribute keys across features, in first-seen order."""
        keys: Dict[str, None] = {}
        for feature in self.features:
            for key in feature.attributes:
                keys.setdefault(key, None)
        return list(keys)

    def has_field(self, name: str) -> bool:
        """True if any feature carries ``name`` as an attribute key."""
        return any(name in feature.attributes for feature in self.features)

    def with_features(self, features: List[Feature], **updates: Any) -> "FeatureSet":
        return self.model_copy(update={"features": list(features), **updates})
