"""Dagster Resources - External Service Connections."""

from .schema_mapper_resource import SchemaMapperResource
from .spatial_db_resource import SpatialDatabaseResource

__all__ = [
    "SchemaMapperResource",
    "SpatialDatabaseResource",
]
