# =============================================================================
# Unit Tests: Discover and Load Ops
# =============================================================================

import json
import logging
from unittest.mock import Mock

import pytest
from dagster import build_op_context

from geoload.errors import RunSetupError
from geoload.spatial_utils import SchemaMapper, StaticRenameProvider
from services.dagster.geoload_pipelines.ops.discover_op import (
    DiscoverConfig,
    _discover_vector_files,
    discover_vector_files,
)
from services.dagster.geoload_pipelines.ops.load_op import (
    LoadBatchConfig,
    _load_vector_batch,
    load_vector_batch,
)


def _write_point_geojson(path, blockid):
    path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    {
                        "type": "Feature",
                        "properties": {"blockid": blockid},
                        "geometry": {"type": "Point", "coordinates": [1.0, 2.0]},
                    }
                ],
            }
        )
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def input_folder(tmp_path):
    folder = tmp_path / "in"
    folder.mkdir()
    _write_point_geojson(folder / "parcels.geojson", "B1")
    (folder / "broken.geojson").write_text("{not json")
    return folder


@pytest.fixture
def mock_loader():
    loader = Mock()
    loader.load.side_effect = lambda table, fs: len(fs)
    return loader


@pytest.fixture
def mock_spatial_db(mock_loader):
    spatial_db = Mock()
    spatial_db.get_loader.return_value = mock_loader
    return spatial_db


@pytest.fixture
def mock_schema_mapper():
    schema_mapper = Mock()
    schema_mapper.get_mapper.side_effect = lambda log=None: SchemaMapper(
        StaticRenameProvider({"parcels": [("blockid", "block_id")]}), log=log
    )
    return schema_mapper


# =============================================================================
# Test: _discover_vector_files
# =============================================================================

def test_discover_lists_matching_files(input_folder):
    log = Mock()

    paths = _discover_vector_files(str(input_folder), ["*.geojson"], log)

    assert [p.split("/")[-1] for p in paths] == ["broken.geojson", "parcels.geojson"]
    log.info.assert_called_once()


def test_discover_empty_folder_warns(tmp_path):
    log = Mock()

    assert _discover_vector_files(str(tmp_path), ["*.geojson"], log) == []
    log.warning.assert_called_once()


def test_discover_missing_folder_is_fatal(tmp_path):
    with pytest.raises(RunSetupError):
        _discover_vector_files(str(tmp_path / "missing"), ["*.geojson"], Mock())


def test_discover_op(input_folder):
    context = build_op_context()

    paths = discover_vector_files(
        context, config=DiscoverConfig(input_folder=str(input_folder), file_patterns=["parcels.*"])
    )

    assert len(paths) == 1
    assert paths[0].endswith("parcels.geojson")


# =============================================================================
# Test: _load_vector_batch
# =============================================================================

def test_load_batch_reports_each_file(
    input_folder, tmp_path, mock_spatial_db, mock_schema_mapper, mock_loader
):
    paths = [str(input_folder / "parcels.geojson"), str(input_folder / "broken.geojson")]

    report = _load_vector_batch(
        spatial_db=mock_spatial_db,
        schema_mapper=mock_schema_mapper,
        paths=paths,
        output_folder=str(tmp_path / "out"),
        output_format="geojson",
        log_folder=str(tmp_path / "logs"),
        log=logging.getLogger("geoload.tests.load_op"),
    )

    assert report["succeeded"] == 1
    assert report["failed"] == ["broken"]
    assert report["summary"] == "1/2 file(s) loaded successfully; failed: broken"
    assert report["results"][0]["stage"] == "done"
    assert report["results"][1]["error_kind"] == "source_read"
    assert (tmp_path / "out" / "parcels.geojson").exists()
    assert not (tmp_path / "out" / "broken.geojson").exists()

    table, loaded = mock_loader.load.call_args[0]
    assert table == "parcels"
    assert loaded.features[0].attributes["block_id"] == "B1"


def test_load_batch_writes_run_log(
    input_folder, tmp_path, mock_spatial_db, mock_schema_mapper
):
    _load_vector_batch(
        spatial_db=mock_spatial_db,
        schema_mapper=mock_schema_mapper,
        paths=[str(input_folder / "parcels.geojson")],
        output_folder=None,
        output_format="geojson",
        log_folder=str(tmp_path / "logs"),
        log=logging.getLogger("geoload.tests.load_op"),
    )

    log_files = list((tmp_path / "logs").glob("geoload_log_*.txt"))
    assert len(log_files) == 1
    assert "All done!" in log_files[0].read_text()


def test_load_batch_rejects_unknown_output_format(mock_spatial_db, mock_schema_mapper):
    with pytest.raises(ValueError):
        _load_vector_batch(
            spatial_db=mock_spatial_db,
            schema_mapper=mock_schema_mapper,
            paths=[],
            output_folder=None,
            output_format="shp",
            log_folder=None,
            log=Mock(),
        )


# =============================================================================
# Test: load_vector_batch op
# =============================================================================

def test_load_vector_batch_op(input_folder, mock_spatial_db, mock_schema_mapper):
    context = build_op_context(
        resources={
            "spatial_db": mock_spatial_db,
            "schema_mapper": mock_schema_mapper,
        },
    )

    report = load_vector_batch(
        context,
        config=LoadBatchConfig(output_folder=None, log_folder=None),
        paths=[str(input_folder / "parcels.geojson")],
    )

    assert report["succeeded"] == 1
    assert report["failed"] == []
    mock_spatial_db.get_loader.assert_called_once()
    mock_schema_mapper.get_mapper.assert_called_once()
