# =============================================================================
# Unit Tests: Column Type Inference
# =============================================================================

from datetime import datetime

import pytest

from geoload.models import Feature, FeatureSet
from geoload.normalization import (
    ColumnKind,
    first_non_null,
    infer_column_kind,
    infer_table_schema,
)


# =============================================================================
# Test: infer_column_kind
# =============================================================================

@pytest.mark.parametrize(
    "sample,expected",
    [
        (1, ColumnKind.INTEGER),
        (1.25, ColumnKind.FLOAT),
        (True, ColumnKind.BOOLEAN),
        (datetime(2024, 1, 1), ColumnKind.TIMESTAMP),
        ("abc", ColumnKind.TEXT),
        (None, ColumnKind.TEXT),
    ],
)
def test_infer_column_kind(sample, expected):
    assert infer_column_kind(sample) is expected


# =============================================================================
# Test: first_non_null / infer_table_schema
# =============================================================================

def test_first_non_null_skips_nulls_and_nan():
    fs = FeatureSet(
        dataset_id="d",
        features=[
            Feature(attributes={"v": None}),
            Feature(attributes={"v": float("nan")}),
            Feature(attributes={}),
            Feature(attributes={"v": 5}),
        ],
    )
    assert first_non_null(fs, "v") == 5


def test_first_non_null_all_null():
    fs = FeatureSet(dataset_id="d", features=[Feature(attributes={"v": None})])
    assert first_non_null(fs, "v") is None


def test_infer_table_schema_uses_first_sampled_value():
    """A text first sample keeps the column TEXT even if later values are numeric."""
    fs = FeatureSet(
        dataset_id="d",
        features=[
            Feature(attributes={"code": "A1", "count": None, "area": 1.5}),
            Feature(attributes={"code": 7, "count": 3, "area": 2.0}),
        ],
    )

    schema = infer_table_schema(fs)

    assert list(schema) == ["code", "count", "area"]
    assert schema["code"] is ColumnKind.TEXT
    assert schema["count"] is ColumnKind.INTEGER
    assert schema["area"] is ColumnKind.FLOAT


def test_infer_table_schema_all_null_column_is_text():
    fs = FeatureSet(dataset_id="d", features=[Feature(attributes={"empty": None})])
    assert infer_table_schema(fs) == {"empty": ColumnKind.TEXT}


def test_infer_table_schema_exclude():
    fs = FeatureSet(dataset_id="d", features=[Feature(attributes={"a": 1, "b": 2})])
    assert list(infer_table_schema(fs, exclude=["b"])) == ["a"]


def test_infer_table_schema_empty_dataset(empty_feature_set):
    assert infer_table_schema(empty_feature_set) == {}
