# =============================================================================
# Spatial SQL Dialects
# =============================================================================
# SQL generation for the table replace-then-convert sequence, per destination
# database: PostGIS (geography) and SQL Server (GEOGRAPHY).
# =============================================================================

from abc import ABC, abstractmethod
from typing import Dict, List

from geoload.models import WGS84_SRID
from geoload.normalization import ColumnKind

__all__ = ["SpatialDialect", "PostGISDialect", "SqlServerDialect", "get_dialect"]


class SpatialDialect(ABC):
    """
    Base class for destination SQL dialects.

    Subclasses provide identifier quoting, the column type vocabulary and
    the geography-specific statements. Statement builders take already
    unquoted names and return complete SQL strings.
    """

    name: str = ""
    column_types: Dict[ColumnKind, str] = {}

    @abstractmethod
    def quote_identifier(self, identifier: str) -> str:
        """Quote an identifier, escaping embedded quote characters."""

    def qualified_table(self, schema: str, table: str) -> str:
        return f"{self.quote_identifier(schema)}.{self.quote_identifier(table)}"

    def column_type(self, kind: ColumnKind) -> str:
        return self.column_types[kind]

    @abstractmethod
    def drop_table_sql(self, schema: str, table: str) -> str:
        """DROP the table if it exists."""

    def create_table_sql(
        self, schema: str, table: str, columns: Dict[str, ColumnKind], temp_column: str
    ) -> str:
        """CREATE the table with one column per attribute plus the transient text column."""
        column_defs: List[str] = [
            f"{self.quote_identifier(name)} {self.column_type(kind)}"
            for name, kind in columns.items()
        ]
        column_defs.append(f"{self.quote_identifier(temp_column)} {self.column_type(ColumnKind.TEXT)}")
        joined = ",\n    ".join(column_defs)
        return f"CREATE TABLE {self.qualified_table(schema, table)} (\n    {joined}\n)"

    def insert_sql(self, schema: str, table: str, columns: List[str], temp_column: str) -> str:
        """Parameterized INSERT using :p0..:pN for attributes and :pgeom for the hex WKB."""
        names = [self.quote_identifier(c) for c in columns] + [self.quote_identifier(temp_column)]
        params = [f":p{i}" for i in range(len(columns))] + [":pgeom"]
        return (
            f"INSERT INTO {self.qualified_table(schema, table)} "
            f"({', '.join(names)}) VALUES ({', '.join(params)})"
        )

    @abstractmethod
    def add_geography_column_sql(self, schema: str, table: str, geom_column: str) -> str:
        """ALTER TABLE to add the native geography column."""

    @abstractmethod
    def populate_geography_sql(
        self, schema: str, table: str, geom_column: str, temp_column: str, srid: int = WGS84_SRID
    ) -> str:
        """UPDATE the geography column from the hex WKB column."""

    def drop_column_sql(self, schema: str, table: str, column: str) -> str:
        return (
            f"ALTER TABLE {self.qualified_table(schema, table)} "
            f"DROP COLUMN {self.quote_identifier(column)}"
        )


class PostGISDialect(SpatialDialect):
    """PostgreSQL + PostGIS ``geography`` type."""

    name = "postgis"
    column_types = {
        ColumnKind.INTEGER: "BIGINT",
        ColumnKind.FLOAT: "DOUBLE PRECISION",
        ColumnKind.BOOLEAN: "BOOLEAN",
        ColumnKind.TIMESTAMP: "TIMESTAMP",
        ColumnKind.TEXT: "TEXT",
    }

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def drop_table_sql(self, schema: str, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.qualified_table(schema, table)}"

    def add_geography_column_sql(self, schema: str, table: str, geom_column: str) -> str:
        return (
            f"ALTER TABLE {self.qualified_table(schema, table)} "
            f"ADD COLUMN {self.quote_identifier(geom_column)} geography(Geometry, {WGS84_SRID})"
        )

    def populate_geography_sql(
        self, schema: str, table: str, geom_column: str, temp_column: str, srid: int = WGS84_SRID
    ) -> str:
        temp = self.quote_identifier(temp_column)
        return (
            f"UPDATE {self.qualified_table(schema, table)} "
            f"SET {self.quote_identifier(geom_column)} = "
            f"ST_SetSRID(ST_GeomFromWKB(decode({temp}, 'hex')), {srid})::geography"
        )


class SqlServerDialect(SpatialDialect):
    """Microsoft SQL Server ``GEOGRAPHY`` type."""

    name = "mssql"
    column_types = {
        ColumnKind.INTEGER: "BIGINT",
        ColumnKind.FLOAT: "FLOAT",
        ColumnKind.BOOLEAN: "BIT",
        ColumnKind.TIMESTAMP: "DATETIME2",
        ColumnKind.TEXT: "NVARCHAR(MAX)",
    }

    def quote_identifier(self, identifier: str) -> str:
        escaped = identifier.replace("]", "]]")
        return f"[{escaped}]"

    def drop_table_sql(self, schema: str, table: str) -> str:
        object_name = self.qualified_table(schema, table).replace("'", "''")
        return (
            f"IF OBJECT_ID(N'{object_name}', N'U') IS NOT NULL "
            f"DROP TABLE {self.qualified_table(schema, table)}"
        )

    def add_geography_column_sql(self, schema: str, table: str, geom_column: str) -> str:
        return (
            f"ALTER TABLE {self.qualified_table(schema, table)} "
            f"ADD {self.quote_identifier(geom_column)} GEOGRAPHY"
        )

    def populate_geography_sql(
        self, schema: str, table: str, geom_column: str, temp_column: str, srid: int = WGS84_SRID
    ) -> str:
        temp = self.quote_identifier(temp_column)
        return (
            f"UPDATE {self.qualified_table(schema, table)} "
            f"SET {self.quote_identifier(geom_column)} = "
            f"geography::STGeomFromWKB(CONVERT(VARBINARY(MAX), {temp}, 2), {srid})"
        )


_DIALECTS = {
    PostGISDialect.name: PostGISDialect,
    SqlServerDialect.name: SqlServerDialect,
}


def get_dialect(name: str) -> SpatialDialect:
    """
    Resolve a dialect by name.

    Args:
        name: "postgis" or "mssql" (case-insensitive)

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return _DIALECTS[name.strip().lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown SQL dialect: {name}. Expected one of: {sorted(_DIALECTS)}"
        )
