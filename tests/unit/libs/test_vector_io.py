# =============================================================================
# Unit Tests: Vector I/O
# =============================================================================

import json
from datetime import datetime

import numpy as np
import pandas as pd
import pytest
from shapely.geometry import Point

from geoload.errors import OutputWriteError, RunSetupError, SourceReadError
from geoload.models import Feature, FeatureSet, OutputFormat
from geoload.spatial_utils import (
    dataset_id_for,
    discover_vector_files,
    read_feature_set,
    write_feature_set,
)
from geoload.spatial_utils.vector_io import to_native


def _write_geojson(path, features, crs_name=None):
    collection = {"type": "FeatureCollection", "features": features}
    if crs_name:
        collection["crs"] = {"type": "name", "properties": {"name": crs_name}}
    path.write_text(json.dumps(collection))
    return path


# =============================================================================
# Test: discover_vector_files / dataset_id_for
# =============================================================================

def test_discover_vector_files_sorted_and_filtered(tmp_path):
    for name in ["b.geojson", "a.geojson", "c.gpkg", "notes.txt"]:
        (tmp_path / name).write_text("")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "d.geojson").write_text("")

    paths = discover_vector_files(str(tmp_path), ["*.geojson", "*.gpkg", "a.*"])

    assert [p.split("/")[-1] for p in paths] == ["a.geojson", "b.geojson", "c.gpkg"]


def test_discover_vector_files_missing_folder(tmp_path):
    with pytest.raises(RunSetupError):
        discover_vector_files(str(tmp_path / "missing"))


def test_dataset_id_for():
    assert dataset_id_for("/data/in/Parcels.geojson") == "Parcels"
    assert dataset_id_for("roads.v2.gpkg") == "roads.v2"


# =============================================================================
# Test: to_native
# =============================================================================

def test_to_native_conversions():
    assert to_native(np.int64(3)) == 3
    assert type(to_native(np.int64(3))) is int
    assert type(to_native(np.float64(1.5))) is float
    assert to_native(np.nan) is None
    assert to_native(pd.NaT) is None
    assert to_native(pd.NA) is None
    assert to_native(pd.Timestamp("2024-01-01")) == datetime(2024, 1, 1)
    assert to_native("x") == "x"
    assert to_native(None) is None


# =============================================================================
# Test: read_feature_set
# =============================================================================

def test_read_feature_set_geojson(tmp_path):
    path = _write_geojson(
        tmp_path / "parcels.geojson",
        [
            {
                "type": "Feature",
                "properties": {"blockid": "B1", "area": 2},
                "geometry": {"type": "Point", "coordinates": [1.0, 2.0]},
            },
            {
                "type": "Feature",
                "properties": {"blockid": "B2", "area": None},
                "geometry": None,
            },
        ],
    )

    fs = read_feature_set(str(path))

    assert fs.dataset_id == "parcels"
    assert fs.crs == "EPSG:4326"
    assert fs.source_path == str(path)
    assert len(fs) == 2
    assert fs.features[0].attributes["blockid"] == "B1"
    assert fs.features[0].geometry.equals(Point(1, 2))
    assert fs.features[1].geometry is None
    assert fs.features[1].attributes["area"] is None


def test_read_feature_set_unreadable(tmp_path):
    path = tmp_path / "broken.geojson"
    path.write_text("{not json")

    with pytest.raises(SourceReadError, match="broken.geojson"):
        read_feature_set(str(path))


def test_read_feature_set_missing_file(tmp_path):
    with pytest.raises(SourceReadError):
        read_feature_set(str(tmp_path / "missing.geojson"))


# =============================================================================
# Test: write_feature_set
# =============================================================================

def test_write_feature_set_geojson_round_trip(tmp_path):
    fs = FeatureSet(
        dataset_id="parcels",
        features=[
            Feature(attributes={"puid": "B1", "Geometry_Type": "Point"}, geometry=Point(1, 2)),
            Feature(attributes={"puid": "B2", "Geometry_Type": "Unknown"}, geometry=None),
        ],
        crs="EPSG:4326",
    )
    target = tmp_path / "out" / "parcels.geojson"

    written = write_feature_set(fs, str(target), OutputFormat.GEOJSON)

    assert written == str(target)
    reread = read_feature_set(written)
    assert [f.attributes["puid"] for f in reread.features] == ["B1", "B2"]
    assert reread.features[0].geometry.equals(Point(1, 2))
    assert reread.features[1].geometry is None


def test_write_feature_set_replaces_existing(tmp_path):
    target = tmp_path / "parcels.geojson"
    target.write_text("stale")
    fs = FeatureSet(
        dataset_id="parcels",
        features=[Feature(attributes={"a": 1}, geometry=Point(0, 0))],
        crs="EPSG:4326",
    )

    write_feature_set(fs, str(target))

    assert json.loads(target.read_text())["type"] == "FeatureCollection"


def test_write_feature_set_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    fs = FeatureSet(dataset_id="d", features=[Feature(geometry=Point(0, 0))])

    with pytest.raises(OutputWriteError):
        write_feature_set(fs, str(blocker / "sub" / "d.geojson"))
