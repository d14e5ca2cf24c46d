"""Column type inference for flattening a FeatureSet into a relational table."""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from geoload.models import FeatureSet, ValueKind, classify_value

__all__ = [
    "ColumnKind",
    "infer_column_kind",
    "first_non_null",
    "infer_table_schema",
]

logger = logging.getLogger(__name__)


class ColumnKind(str, Enum):
    """Declared column category; dialects map these to concrete SQL types."""

    INTEGER = "INTEGER"  # wide integer
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    TIMESTAMP = "TIMESTAMP"
    TEXT = "TEXT"  # unbounded text


_VALUE_KIND_TO_COLUMN = {
    ValueKind.INTEGER: ColumnKind.INTEGER,
    ValueKind.FLOAT: ColumnKind.FLOAT,
    ValueKind.BOOLEAN: ColumnKind.BOOLEAN,
    ValueKind.TIMESTAMP: ColumnKind.TIMESTAMP,
    ValueKind.STRING: ColumnKind.TEXT,
    ValueKind.NULL: ColumnKind.TEXT,
}


def infer_column_kind(sample: Any) -> ColumnKind:
    """
    Map the first sampled value of a column to its declared column kind.

    This is best-effort inference, not a declared schema: a column whose
    first sample is text but later holds numbers stays TEXT, and a column
    whose first sample is an integer fails on insert if it later holds text.

    Args:
        sample: First non-null value of the column, or None if there is none

    Returns:
        ColumnKind for the column

    Example:
        >>> infer_column_kind(42)
        <ColumnKind.INTEGER: 'INTEGER'>
        >>> infer_column_kind(None)
        <ColumnKind.TEXT: 'TEXT'>
    """
    return _VALUE_KIND_TO_COLUMN[classify_value(sample)]


def first_non_null(feature_set: FeatureSet, key: str) -> Optional[Any]:
    """Return the first value of ``key`` that is not NULL, scanning in feature order."""
    for feature in feature_set.features:
        value = feature.attributes.get(key)
        if classify_value(value) is not ValueKind.NULL:
            return value
    return None


def infer_table_schema(
    feature_set: FeatureSet, exclude: Iterable[str] = ()
) -> Dict[str, ColumnKind]:
    """
    Infer one column kind per attribute key of a FeatureSet.

    Args:
        feature_set: Enriched feature set
        exclude: Keys to leave out (e.g. reserved column names)

    Returns:
        Ordered dict of column name → ColumnKind, in schema key order
    """
    excluded = set(exclude)
    schema: Dict[str, ColumnKind] = {}
    for key in feature_set.schema_keys():
        if key in excluded:
            continue
        schema[key] = infer_column_kind(first_non_null(feature_set, key))

    logger.debug(f"Inferred {len(schema)} column(s) for {feature_set.dataset_id}: {schema}")
    return schema
