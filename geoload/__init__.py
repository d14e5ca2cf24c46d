# =============================================================================
# GeoLoad Shared Libraries
# =============================================================================
# Core libraries for the vector-to-geography batch loader.
# See individual sub-packages for detailed documentation.
# =============================================================================

"""
GeoLoad shared libraries.

Sub-packages:
- models: Feature records, rename mappings, run results and settings
- spatial_utils: Vector I/O, geometry normalization, schema mapping, SQL loading
- transformations: Attribute enrichment steps
"""

__version__ = "0.1.0"
