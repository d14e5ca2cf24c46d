# =============================================================================
# Vector I/O - Files to FeatureSets and back
# =============================================================================
# Thin wrapper around GeoPandas for reading input vector files into
# FeatureSets and writing transformed FeatureSets to output files.
# =============================================================================

import logging
from pathlib import Path
from typing import Any, Iterable, List

import geopandas as gpd
import numpy as np
import pandas as pd

from geoload.errors import OutputWriteError, RunSetupError, SourceReadError
from geoload.models import Feature, FeatureSet, OutputFormat

__all__ = [
    "discover_vector_files",
    "dataset_id_for",
    "read_feature_set",
    "write_feature_set",
    "to_native",
]

logger = logging.getLogger(__name__)


def discover_vector_files(folder: str, patterns: Iterable[str] = ("*.geojson",)) -> List[str]:
    """
    List input files in ``folder`` (top level only) matching any pattern.

    Args:
        folder: Input folder
        patterns: Glob patterns, e.g. ["*.geojson", "*.gpkg"]

    Returns:
        Sorted, de-duplicated list of file paths

    Raises:
        RunSetupError: If the folder does not exist or cannot be listed
    """
    root = Path(folder)
    if not root.is_dir():
        raise RunSetupError(f"Input folder does not exist or is not a directory: {folder}")

    try:
        found = {str(p) for pattern in patterns for p in root.glob(pattern) if p.is_file()}
    except OSError as e:
        raise RunSetupError(f"Cannot list input folder {folder}: {e}") from e
    return sorted(found)


def dataset_id_for(path: str) -> str:
    """Dataset identifier of an input file: base name without extension."""
    return Path(path).stem


def to_native(value: Any) -> Any:
    """
    Convert pandas/numpy scalars to plain Python values.

    NaN, NaT and pandas NA become None; numpy scalars become their Python
    equivalents; pandas Timestamps become datetimes.
    """
    if value is None:
        return None
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _crs_identifier(frame: gpd.GeoDataFrame):
    if frame.crs is None:
        return None
    authority = frame.crs.to_authority()
    if authority is not None:
        return f"{authority[0]}:{authority[1]}"
    return frame.crs.to_wkt()


def read_feature_set(path: str) -> FeatureSet:
    """
    Read a vector file into a FeatureSet.

    Args:
        path: Path to a vector file readable by GeoPandas (GeoJSON, GPKG, SHP, ...)

    Returns:
        FeatureSet with file-order features and the declared source CRS

    Raises:
        SourceReadError: If the file is unreadable or not a vector dataset
    """
    try:
        frame = gpd.read_file(path)
        geometry_name = frame.geometry.name
        columns = [c for c in frame.columns if c != geometry_name]

        features = []
        for record, geometry in zip(
            frame[columns].to_dict(orient="records"), frame.geometry
        ):
            features.append(
                Feature(
                    attributes={k: to_native(v) for k, v in record.items()},
                    geometry=None if geometry is None or pd.isna(geometry) else geometry,
                )
            )

        feature_set = FeatureSet(
            dataset_id=dataset_id_for(path),
            features=features,
            crs=_crs_identifier(frame),
            source_path=str(path),
        )
    except Exception as e:
        raise SourceReadError(f"Cannot read vector file {path}: {e}") from e

    logger.debug(f"Read {len(feature_set)} feature(s) from {path} (crs={feature_set.crs})")
    return feature_set


def write_feature_set(
    feature_set: FeatureSet,
    path: str,
    output_format: OutputFormat = OutputFormat.GEOJSON,
) -> str:
    """
    Write a FeatureSet to a vector file, replacing any existing file.

    Args:
        feature_set: Features to write (transient WKB values are not written)
        path: Destination path
        output_format: Output format (selects the OGR driver)

    Returns:
        The written path

    Raises:
        OutputWriteError: If the file cannot be written
    """
    try:
        frame = gpd.GeoDataFrame(
            [f.attributes for f in feature_set.features],
            geometry=[f.geometry for f in feature_set.features],
            crs=feature_set.crs,
        )
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            target.unlink()
        frame.to_file(str(target), driver=output_format.driver)
    except Exception as e:
        raise OutputWriteError(f"Cannot write output file {path}: {e}") from e

    return str(path)
