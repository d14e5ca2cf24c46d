# =============================================================================
# Configuration Models Module
# =============================================================================
# Provides Pydantic Settings models for the loader:
# - LoaderSettings: Folders, schema mapper file, load behaviour
# - SpatialDbSettings: Destination spatial database connection
# =============================================================================

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .spatial import OutputFormat

__all__ = [
    "LoaderSettings",
    "SpatialDbSettings",
]


# =============================================================================
# Loader Settings
# =============================================================================

class LoaderSettings(BaseSettings):
    """
    Configuration for a loader run.

    Maps environment variables with prefix "GEOLOAD_":
    - GEOLOAD_INPUT_FOLDER → input_folder
    - GEOLOAD_OUTPUT_FOLDER → output_folder
    - GEOLOAD_SCHEMA_FILE → schema_file
    - GEOLOAD_LOG_FOLDER → log_folder
    - GEOLOAD_FILE_PATTERNS → file_patterns (JSON list)
    - GEOLOAD_OUTPUT_FORMAT → output_format
    - GEOLOAD_TABLE_SCHEMA → table_schema
    - GEOLOAD_DIALECT → dialect
    - GEOLOAD_ATOMIC → atomic
    - GEOLOAD_INSERT_BATCH_SIZE → insert_batch_size

    Attributes:
        input_folder: Folder scanned for input vector files
        output_folder: Folder receiving one transformed file per input
        schema_file: Excel workbook with one rename sheet per dataset
        log_folder: Folder for the timestamped run log file
        file_patterns: Glob patterns selecting input files
        output_format: Format of the transformed output files
        table_schema: Destination schema namespace (default: "public")
        dialect: SQL dialect of the destination ("postgis" or "mssql")
        atomic: Run the table replace sequence in one transaction
        insert_batch_size: Rows per executemany batch
        geometry_column: Name of the native geography column
        temp_geometry_column: Name of the transient hex WKB column
    """

    input_folder: Optional[str] = Field(None, validation_alias="GEOLOAD_INPUT_FOLDER", description="Input folder")
    output_folder: Optional[str] = Field(None, validation_alias="GEOLOAD_OUTPUT_FOLDER", description="Output folder")
    schema_file: Optional[str] = Field(None, validation_alias="GEOLOAD_SCHEMA_FILE", description="Rename mapping workbook")
    log_folder: str = Field("logs", validation_alias="GEOLOAD_LOG_FOLDER", description="Run log folder")
    file_patterns: List[str] = Field(["*.geojson"], validation_alias="GEOLOAD_FILE_PATTERNS", description="Input glob patterns")
    output_format: OutputFormat = Field(OutputFormat.GEOJSON, validation_alias="GEOLOAD_OUTPUT_FORMAT")
    table_schema: str = Field("public", validation_alias="GEOLOAD_TABLE_SCHEMA", description="Destination schema")
    dialect: str = Field("postgis", validation_alias="GEOLOAD_DIALECT", description="postgis or mssql")
    atomic: bool = Field(True, validation_alias="GEOLOAD_ATOMIC", description="Single-transaction table replace")
    insert_batch_size: int = Field(1000, gt=0, validation_alias="GEOLOAD_INSERT_BATCH_SIZE")
    geometry_column: str = Field("geom", validation_alias="GEOLOAD_GEOMETRY_COLUMN")
    temp_geometry_column: str = Field("tmp_geom", validation_alias="GEOLOAD_TEMP_GEOMETRY_COLUMN")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore unrelated env vars from shared .env files
    )

    @field_validator("dialect")
    @classmethod
    def validate_dialect(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in ("postgis", "mssql"):
            raise ValueError(f"dialect must be 'postgis' or 'mssql', got: {v}")
        return normalized


# =============================================================================
# Spatial Database Settings
# =============================================================================

class SpatialDbSettings(BaseSettings):
    """
    Configuration for the destination spatial database.

    Maps environment variables with prefix "SPATIAL_DB_":
    - SPATIAL_DB_URL → url (full SQLAlchemy URL; overrides the parts below)
    - SPATIAL_DB_HOST → host
    - SPATIAL_DB_PORT → port
    - SPATIAL_DB_USER → user
    - SPATIAL_DB_PASSWORD → password
    - SPATIAL_DB_NAME → database

    Attributes:
        url: Full SQLAlchemy URL, e.g. for SQL Server via pyodbc
        host: PostGIS host (default: "postgis")
        port: PostGIS port (default: 5432)
        user: PostgreSQL user
        password: PostgreSQL password
        database: Database name (default: "spatial_db")
    """

    url: Optional[str] = Field(None, validation_alias="SPATIAL_DB_URL", description="Full SQLAlchemy URL")
    host: str = Field("postgis", validation_alias="SPATIAL_DB_HOST", description="Database host")
    port: int = Field(5432, validation_alias="SPATIAL_DB_PORT", description="Database port")
    user: str = Field("", validation_alias="SPATIAL_DB_USER", description="Database user")
    password: str = Field("", validation_alias="SPATIAL_DB_PASSWORD", description="Database password")
    database: str = Field("spatial_db", validation_alias="SPATIAL_DB_NAME", description="Database name")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def connection_string(self) -> str:
        """
        Build the SQLAlchemy connection URI.

        Format: postgresql://[user]:[password]@[host]:[port]/[database],
        unless ``url`` is set, in which case it is returned unchanged.

        Returns:
            Connection URI string
        """
        if self.url:
            return self.url
        return (
            f"postgresql://{self.user}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}"
        )
