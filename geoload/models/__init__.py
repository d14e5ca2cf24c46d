# =============================================================================
# Data Models Library
# =============================================================================
# Pydantic models for the vector-to-geography loader.
# =============================================================================

"""
Data models for the loader.

This library provides:
- Feature, FeatureSet: In-memory dataset records
- RenameMapping: Dataset-scoped field rename rules
- FileStage, ErrorKind, FileResult, BatchReport: Run outcomes
- Spatial types: CRS validation, output formats, WGS84 constants
- Configuration models
"""

# Spatial types
from .spatial import (
    OutputFormat,
    WGS84_CRS,
    WGS84_SRID,
    validate_crs,
)

# Feature models
from .feature import (
    ValueKind,
    classify_value,
    Feature,
    FeatureSet,
)

# Mapping models
from .mapping import RenameMapping

# Result models
from .results import (
    FileStage,
    ErrorKind,
    FileResult,
    BatchReport,
)

# Configuration models
from .config import (
    LoaderSettings,
    SpatialDbSettings,
)

__all__ = [
    # Spatial types
    "OutputFormat",
    "WGS84_CRS",
    "WGS84_SRID",
    "validate_crs",
    # Feature models
    "ValueKind",
    "classify_value",
    "Feature",
    "FeatureSet",
    # Mapping models
    "RenameMapping",
    # Result models
    "FileStage",
    "ErrorKind",
    "FileResult",
    "BatchReport",
    # Configuration models
    "LoaderSettings",
    "SpatialDbSettings",
]
