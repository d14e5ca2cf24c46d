"""Dagster Definitions - Repository Configuration.

Defines the jobs and resources of the vector loader. Resource values come
from the SPATIAL_DB_* and GEOLOAD_* environment variables (or a .env file).
"""

from typing import Any, Dict

from dagster import Definitions

from geoload.models import LoaderSettings, SpatialDbSettings

from .jobs import vector_ingest_job
from .resources import SchemaMapperResource, SpatialDatabaseResource


# =============================================================================
# Resources
# =============================================================================

def build_resources() -> Dict[str, Any]:
    """
    Build the resource mapping from the current environment settings.

    Returns:
        Resource key → configured resource instance
    """
    loader_settings = LoaderSettings()
    return {
        "spatial_db": SpatialDatabaseResource.from_settings(
            SpatialDbSettings(), loader_settings
        ),
        "schema_mapper": SchemaMapperResource.from_settings(loader_settings),
    }


# =============================================================================
# Definitions
# =============================================================================

defs = Definitions(
    jobs=[
        vector_ingest_job,
    ],
    resources=build_resources(),
    schedules=[],
    sensors=[],
)
