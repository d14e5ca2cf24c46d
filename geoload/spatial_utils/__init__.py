# =============================================================================
# Spatial Utils Library
# =============================================================================
# Vector I/O, geometry normalization, schema mapping and geography loading.
# =============================================================================

"""
Spatial utilities for the loader.

This library provides:
- SchemaMapper: Dataset id → RenameMapping lookup (Excel or in-memory source)
- GeometryNormalizer: WGS84 reprojection and hex WKB encoding
- Vector I/O: Read vector files into FeatureSets, write them back out
- SpatialTableLoader: Replace-then-convert geography table load
- Dialects: PostGIS and SQL Server statement generation
"""

from .schema_mapper import (
    ExcelRenameProvider,
    RenameMappingProvider,
    SchemaMapper,
    StaticRenameProvider,
)
from .geometry import GeometryNormalizer, decode_wkb_hex, encode_wkb_hex
from .vector_io import (
    dataset_id_for,
    discover_vector_files,
    read_feature_set,
    write_feature_set,
)
from .dialects import PostGISDialect, SpatialDialect, SqlServerDialect, get_dialect
from .table_loader import LOAD_STEPS, SpatialTableLoader

__version__ = "0.1.0"

__all__ = [
    "ExcelRenameProvider",
    "RenameMappingProvider",
    "SchemaMapper",
    "StaticRenameProvider",
    "GeometryNormalizer",
    "decode_wkb_hex",
    "encode_wkb_hex",
    "dataset_id_for",
    "discover_vector_files",
    "read_feature_set",
    "write_feature_set",
    "PostGISDialect",
    "SpatialDialect",
    "SqlServerDialect",
    "get_dialect",
    "LOAD_STEPS",
    "SpatialTableLoader",
]
