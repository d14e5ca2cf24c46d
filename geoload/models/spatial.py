# =============================================================================
# Spatial Types Module
# =============================================================================
# Provides reusable spatial data types with validation:
# - validate_crs: Coordinate Reference System strings (EPSG, WKT, PROJ)
# - OutputFormat: Supported output formats for transformed vector files
# - WGS84 constants used for the canonical geography SRID
# =============================================================================

import re
from enum import Enum

__all__ = [
    "OutputFormat",
    "WGS84_CRS",
    "WGS84_SRID",
    "validate_crs",
]

WGS84_SRID = 4326
WGS84_CRS = f"EPSG:{WGS84_SRID}"


class OutputFormat(str, Enum):
    """Supported single-file formats for the transformed vector file written per input."""

    GEOJSON = "geojson"
    GPKG = "gpkg"

    @property
    def driver(self) -> str:
        """OGR driver name for this format."""
        return {
            OutputFormat.GEOJSON: "GeoJSON",
            OutputFormat.GPKG: "GPKG",
        }[self]

    @property
    def extension(self) -> str:
        return {
            OutputFormat.GEOJSON: ".geojson",
            OutputFormat.GPKG: ".gpkg",
        }[self]


def validate_crs(value: str) -> str:
    """
    Validate and normalize a Coordinate Reference System string.

    Supports three formats:
    1. Authority codes: "EPSG:4326", "epsg:2193" (normalized to uppercase)
    2. WKT strings: WKT1 ("PROJCS[...", "GEOGCS[...") or WKT2 ("PROJCRS[...", "GEOGCRS[...")
    3. PROJ strings: "+proj=utm +zone=55 +south ..."

    Args:
        value: CRS string to validate

    Returns:
        Normalized CRS string (authority codes are uppercased)

    Raises:
        TypeError: If the value is not a string
        ValueError: If the CRS format is invalid
    """
    if not isinstance(value, str):
        raise TypeError(f"CRS must be a string, got {type(value).__name__}")

    value = value.strip()
    if not value:
        raise ValueError("CRS cannot be empty or whitespace only")

    # ESRI authority codes show up in shapefile .prj round trips
    if re.match(r'^(EPSG|ESRI):\d{4,6}$', value, re.IGNORECASE):
        return value.upper()

    wkt_starts = (
        'PROJCS[', 'GEOGCS[', 'COMPD_CS[', 'GEOCCS[',
        'PROJCRS[', 'GEOGCRS[', 'COMPOUNDCRS[', 'GEODCRS[', 'BOUNDCRS[',
    )
    if value.startswith(wkt_starts) and value.endswith(']'):
        if value.count('[') == value.count(']'):
            return value

    if value.startswith('+proj=') and '=' in value[6:]:
        return value

    raise ValueError(
        f"Invalid CRS format. Must be one of:\n"
        f"  - Authority code: 'EPSG:4326'\n"
        f"  - WKT string: 'PROJCS[...]' or 'GEOGCRS[...]'\n"
        f"  - PROJ string: '+proj=utm +zone=55 ...'\n"
        f"Got: {value[:100]}{'...' if len(value) > 100 else ''}"
    )

