"""
Shared pytest fixtures for loader tests.

Provides reusable feature sets to avoid duplication across test files.
"""

import logging

import pytest
from shapely.geometry import LineString, Point, Polygon

from geoload.models import Feature, FeatureSet


# =============================================================================
# Logger Fixtures
# =============================================================================

@pytest.fixture
def test_log():
    """Plain logger passed where components accept a log object."""
    return logging.getLogger("geoload.tests")


# =============================================================================
# Feature Fixtures
# =============================================================================

@pytest.fixture
def point_feature():
    """Single point feature with a blockid and matching dates."""
    return Feature(
        attributes={
            "blockid": 7,
            "name": "A",
            "created_date": "2021-01-01",
            "last_edited_date": "2021-01-01",
        },
        geometry=Point(174.7, -36.8),
    )


@pytest.fixture
def points_feature_set(point_feature):
    """WGS84 point dataset with two features."""
    second = Feature(
        attributes={
            "blockid": 8,
            "name": "B",
            "created_date": "2021-01-01",
            "last_edited_date": "2022-05-04",
        },
        geometry=Point(175.0, -37.0),
    )
    return FeatureSet(
        dataset_id="parcels",
        features=[point_feature, second],
        crs="EPSG:4326",
    )


@pytest.fixture
def mixed_feature_set():
    """Dataset with mixed geometry kinds, a null geometry and no date fields."""
    return FeatureSet(
        dataset_id="mixed",
        features=[
            Feature(attributes={"id": 1}, geometry=Point(0, 0)),
            Feature(attributes={"id": 2}, geometry=LineString([(0, 0), (1, 1)])),
            Feature(
                attributes={"id": 3},
                geometry=Polygon([(0, 0), (1, 0), (1, 1), (0, 0)]),
            ),
            Feature(attributes={"id": 4}, geometry=None),
        ],
        crs="EPSG:4326",
    )


@pytest.fixture
def empty_feature_set():
    """Dataset with no features."""
    return FeatureSet(dataset_id="empty", features=[], crs="EPSG:4326")
