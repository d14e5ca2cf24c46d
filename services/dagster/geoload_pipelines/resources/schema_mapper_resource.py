# =============================================================================
# Schema Mapper Resource - Rename Mapping Source
# =============================================================================
# Exposes the Excel rename-mapping workbook to ops as a SchemaMapper.
# =============================================================================

from typing import Optional

from dagster import ConfigurableResource
from pydantic import Field

from geoload.models import LoaderSettings
from geoload.spatial_utils import ExcelRenameProvider, SchemaMapper

__all__ = ["SchemaMapperResource"]


class SchemaMapperResource(ConfigurableResource):
    """
    Dagster resource for the rename-mapping workbook.

    Each ``get_mapper`` call returns a fresh SchemaMapper whose sheet list
    and mappings are cached for the lifetime of that mapper (one run).

    Attributes:
        schema_file: Path to the .xlsx workbook; empty disables renaming
    """

    schema_file: str = Field("", description="Path to the rename mapping workbook")

    @classmethod
    def from_settings(cls, settings: Optional[LoaderSettings] = None) -> "SchemaMapperResource":
        """Build the resource from GEOLOAD_SCHEMA_FILE (empty when unset)."""
        settings = settings or LoaderSettings()
        return cls(schema_file=settings.schema_file or "")

    def get_mapper(self, log=None) -> SchemaMapper:
        provider = ExcelRenameProvider(self.schema_file) if self.schema_file else None
        return SchemaMapper(provider, log=log)
