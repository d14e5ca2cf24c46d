# =============================================================================
# Vector Transformation Steps
# =============================================================================
# Built-in derived fields and schema-driven renaming:
# - DerivePuidStep: puid := blockid
# - GeometryTypeStep: Geometry_Type := geometry kind or "Unknown"
# - GeometryStatusStep: Geometry_Status := New / Updated / Unknown
# - RenameFieldsStep: Apply a RenameMapping
# =============================================================================

from typing import Any, Dict

from geoload.models import FeatureSet, RenameMapping, ValueKind, classify_value

from .base import VectorStep

__all__ = [
    "DerivePuidStep",
    "GeometryTypeStep",
    "GeometryStatusStep",
    "RenameFieldsStep",
    "UNKNOWN",
]

UNKNOWN = "Unknown"


class DerivePuidStep(VectorStep):
    """
    Copy ``blockid`` into ``puid`` (same value, same type).

    When the dataset has ``blockid``, features lacking it get a null ``puid``
    so every row carries the same columns. A dataset without ``blockid`` is
    returned unchanged and the absence is logged once.
    """

    name = "derive_puid"

    def __init__(self, source_field: str = "blockid", target_field: str = "puid"):
        self.source_field = source_field
        self.target_field = target_field

    def transform(self, feature_set: FeatureSet, log) -> FeatureSet:
        if not feature_set.has_field(self.source_field):
            log.warning(
                f" - Warning: '{self.source_field}' not found. Skipping '{self.target_field}' creation."
            )
            return feature_set

        log.info(f" - Creating new field '{self.target_field}' from '{self.source_field}'")
        features = []
        for feature in feature_set.features:
            attributes = dict(feature.attributes)
            attributes[self.target_field] = attributes.get(self.source_field)
            features.append(feature.with_attributes(attributes))
        return feature_set.with_features(features)


class GeometryTypeStep(VectorStep):
    """Set ``Geometry_Type`` to the geometry's kind (e.g. "Point"), or "Unknown" if null."""

    name = "geometry_type"

    def __init__(self, target_field: str = "Geometry_Type"):
        self.target_field = target_field

    def transform(self, feature_set: FeatureSet, log) -> FeatureSet:
        features = []
        for feature in feature_set.features:
            attributes = dict(feature.attributes)
            attributes[self.target_field] = (
                UNKNOWN if feature.geometry is None else feature.geometry.geom_type
            )
            features.append(feature.with_attributes(attributes))

        kinds = sorted({f.attributes[self.target_field] for f in features})
        log.info(f" - Adding '{self.target_field}' field ({', '.join(kinds) or 'no features'})")
        return feature_set.with_features(features)


class GeometryStatusStep(VectorStep):
    """
    Set ``Geometry_Status`` by comparing creation and last-edit dates.

    - Either date field absent from the dataset schema → "Unknown" everywhere
    - Either value null or empty on a feature → "Unknown"
    - String forms equal → "New", otherwise "Updated"
    """

    name = "geometry_status"

    def __init__(
        self,
        created_field: str = "created_date",
        edited_field: str = "last_edited_date",
        target_field: str = "Geometry_Status",
    ):
        self.created_field = created_field
        self.edited_field = edited_field
        self.target_field = target_field

    @staticmethod
    def _as_text(value: Any):
        if classify_value(value) is ValueKind.NULL:
            return None
        text_value = str(value)
        return text_value or None

    def status_for(self, attributes: Dict[str, Any]) -> str:
        created = self._as_text(attributes.get(self.created_field))
        edited = self._as_text(attributes.get(self.edited_field))
        if created is None or edited is None:
            return UNKNOWN
        return "New" if created == edited else "Updated"

    def transform(self, feature_set: FeatureSet, log) -> FeatureSet:
        has_dates = feature_set.has_field(self.created_field) and feature_set.has_field(
            self.edited_field
        )

        features = []
        for feature in feature_set.features:
            attributes = dict(feature.attributes)
            attributes[self.target_field] = (
                self.status_for(attributes) if has_dates else UNKNOWN
            )
            features.append(feature.with_attributes(attributes))

        if has_dates:
            counts: Dict[str, int] = {}
            for feature in features:
                status = feature.attributes[self.target_field]
                counts[status] = counts.get(status, 0) + 1
            summary = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
            log.info(f" - Adding '{self.target_field}' field based on date comparison ({summary})")
        else:
            log.info(f" - Missing date fields; setting {self.target_field} = '{UNKNOWN}'")
        return feature_set.with_features(features)


class RenameFieldsStep(VectorStep):
    """
    Apply a RenameMapping to every feature.

    Pairs whose old name is not a key are ignored. Renames are applied
    simultaneously, so chains like a→b, b→c move each value exactly once.
    A renamed field whose new name already exists replaces that field.
    """

    name = "rename_fields"

    def __init__(self, mapping: RenameMapping):
        self.mapping = mapping

    def transform(self, feature_set: FeatureSet, log) -> FeatureSet:
        rename = self.mapping.as_dict()
        schema = set(feature_set.schema_keys())
        matched = [old for old in rename if old in schema]
        if not matched:
            log.info(" - No matching fields to rename.")
            return feature_set

        log.info(f" - Renaming {len(matched)} fields")
        overwritten = set()
        features = []
        for feature in feature_set.features:
            targets = {rename[k] for k in feature.attributes if k in rename}
            attributes = {}
            for key, value in feature.attributes.items():
                if key in rename:
                    attributes[rename[key]] = value
                elif key in targets:
                    overwritten.add(key)
                else:
                    attributes[key] = value
            features.append(feature.with_attributes(attributes))

        if overwritten:
            log.warning(f" - Renamed fields replaced existing field(s): {', '.join(sorted(overwritten))}")
        return feature_set.with_features(features)
