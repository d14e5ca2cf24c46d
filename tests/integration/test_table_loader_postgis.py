"""
Integration tests for SpatialTableLoader against a real PostGIS database.

Requires SPATIAL_DB_* environment variables pointing at a PostGIS instance.
"""

import pytest
from shapely.geometry import Point
from sqlalchemy import create_engine, text

from geoload.models import Feature, FeatureSet, SpatialDbSettings
from geoload.spatial_utils import GeometryNormalizer, PostGISDialect, SpatialTableLoader


pytestmark = pytest.mark.integration

TABLE = "geoload_it_parcels"


@pytest.fixture
def engine():
    """Create a pooled engine from SPATIAL_DB_* settings."""
    engine = create_engine(SpatialDbSettings().connection_string, pool_pre_ping=True)
    yield engine
    with engine.begin() as conn:
        conn.execute(text(f'DROP TABLE IF EXISTS public."{TABLE}"'))
    engine.dispose()


@pytest.fixture
def loader(engine):
    return SpatialTableLoader(engine, PostGISDialect(), schema="public")


def _feature_set(count, extra_field=None):
    features = []
    for i in range(count):
        attributes = {"blockid": f"B{i}", "area": i * 1.5}
        if extra_field:
            attributes[extra_field] = i
        features.append(Feature(attributes=attributes, geometry=Point(174 + i * 0.01, -36.8)))
    features.append(Feature(attributes={"blockid": "null-geom", "area": None}, geometry=None))
    fs = FeatureSet(dataset_id=TABLE, features=features, crs="EPSG:4326")
    return GeometryNormalizer().encode(fs)


def _columns(engine):
    with engine.connect() as conn:
        rows = conn.execute(
            text(
                """
                SELECT column_name, udt_name
                FROM information_schema.columns
                WHERE table_schema = 'public' AND table_name = :table
                ORDER BY ordinal_position
                """
            ),
            {"table": TABLE},
        )
        return {name: udt for name, udt in rows}


class TestSpatialTableLoaderPostGIS:
    """Replace-then-convert load against PostGIS."""

    def test_load_creates_geography_table(self, engine, loader):
        count = loader.load(TABLE, _feature_set(3))

        assert count == 4
        assert loader.row_count(TABLE) == 4
        columns = _columns(engine)
        assert columns["geom"] == "geography"
        assert "tmp_geom" not in columns

        with engine.connect() as conn:
            srid = conn.execute(
                text(f'SELECT ST_SRID(geom::geometry) FROM public."{TABLE}" WHERE geom IS NOT NULL LIMIT 1')
            ).scalar()
            nulls = conn.execute(
                text(f'SELECT COUNT(*) FROM public."{TABLE}" WHERE geom IS NULL')
            ).scalar()
        assert srid == 4326
        assert nulls == 1

    def test_loading_twice_replaces_table(self, engine, loader):
        """Second load leaves one table with the second run's rows and schema."""
        loader.load(TABLE, _feature_set(5))
        loader.load(TABLE, _feature_set(2, extra_field="rank"))

        assert loader.row_count(TABLE) == 3
        columns = _columns(engine)
        assert "rank" in columns
        assert "tmp_geom" not in columns

    def test_empty_dataset_leaves_geography_only_table(self, engine, loader):
        empty = FeatureSet(dataset_id=TABLE, features=[], crs="EPSG:4326")

        assert loader.load(TABLE, empty) == 0
        assert loader.row_count(TABLE) == 0
        assert list(_columns(engine)) == ["geom"]
