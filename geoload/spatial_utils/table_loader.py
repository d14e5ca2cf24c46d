# =============================================================================
# Spatial Table Loader - Replace-then-Convert Geography Load
# =============================================================================
# Replaces a destination table with the contents of a FeatureSet:
#   drop → create (+ tmp hex column) → insert → add geography → convert → drop tmp
# =============================================================================

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from geoload.errors import SqlExecutionError
from geoload.models import WGS84_SRID, FeatureSet, ValueKind, classify_value
from geoload.normalization import ColumnKind, infer_table_schema
from .dialects import SpatialDialect
from .geometry import encode_wkb_hex

__all__ = ["SpatialTableLoader", "LOAD_STEPS"]

logger = logging.getLogger(__name__)

LOAD_STEPS = (
    "drop_table",
    "create_table",
    "insert_rows",
    "add_geography_column",
    "populate_geography",
    "drop_temp_column",
)


class SpatialTableLoader:
    """
    Loads a FeatureSet into a geography-typed table, fully replacing it.

    With ``atomic=True`` the six statements run inside a single transaction,
    so a failure leaves the previous table intact. With ``atomic=False`` each
    statement is committed on its own and a failure after the drop can leave
    the table missing or partially built.

    Args:
        engine: SQLAlchemy engine (pooled; one connection is borrowed per load)
        dialect: SpatialDialect for the destination database
        schema: Destination schema namespace
        geometry_column: Name of the native geography column
        temp_geometry_column: Name of the transient hex WKB column
        atomic: Run all steps in one transaction
        insert_batch_size: Rows per executemany batch
        log: Logger-like object (logging.Logger or Dagster context.log)

    Example:
        >>> loader = SpatialTableLoader(engine, PostGISDialect(), schema="public")
        >>> loader.load("parcels", feature_set)
        120
    """

    def __init__(
        self,
        engine: Engine,
        dialect: SpatialDialect,
        schema: str = "public",
        geometry_column: str = "geom",
        temp_geometry_column: str = "tmp_geom",
        atomic: bool = True,
        insert_batch_size: int = 1000,
        log=None,
    ):
        if insert_batch_size <= 0:
            raise ValueError(f"insert_batch_size must be positive, got {insert_batch_size}")
        self.engine = engine
        self.dialect = dialect
        self.schema = schema
        self.geometry_column = geometry_column
        self.temp_geometry_column = temp_geometry_column
        self.atomic = atomic
        self.insert_batch_size = insert_batch_size
        self.log = log or logger

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def plan_columns(self, table_name: str, feature_set: FeatureSet) -> Dict[str, ColumnKind]:
        """
        Infer the attribute columns for a table.

        Raises:
            SqlExecutionError: If an attribute collides with the geography or temp column
        """
        columns = infer_table_schema(feature_set)
        reserved = {self.geometry_column, self.temp_geometry_column} & set(columns)
        if reserved:
            raise SqlExecutionError(
                f"Attribute name(s) {sorted(reserved)} collide with reserved geometry columns",
                step="create_table",
                table=self._table_label(table_name),
            )
        return columns

    def build_rows(self, feature_set: FeatureSet, columns: List[str]) -> List[Dict[str, Any]]:
        """Bind parameters for every feature: p0..pN attributes, pgeom hex WKB."""
        rows = []
        for feature in feature_set.features:
            row = {}
            for i, column in enumerate(columns):
                value = feature.attributes.get(column)
                row[f"p{i}"] = None if classify_value(value) is ValueKind.NULL else value
            wkb_hex = feature.wkb_hex
            if wkb_hex is None and feature.geometry is not None:
                wkb_hex = encode_wkb_hex(feature.geometry)
            row["pgeom"] = wkb_hex
            rows.append(row)
        return rows

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _table_label(self, table_name: str) -> str:
        return f"{self.schema}.{table_name}"

    def _execute(self, conn: Connection, step: str, table_name: str, sql: str, params=None) -> None:
        try:
            if params is None:
                conn.execute(text(sql))
            else:
                conn.execute(text(sql), params)
        except SQLAlchemyError as e:
            raise SqlExecutionError(
                f"Step '{step}' failed for {self._table_label(table_name)}: {e}",
                step=step,
                table=self._table_label(table_name),
            ) from e

    def _run_steps(
        self,
        conn: Connection,
        table_name: str,
        columns: Dict[str, ColumnKind],
        rows: List[Dict[str, Any]],
        commit_each: bool,
    ) -> None:
        d = self.dialect
        schema, geom, tmp = self.schema, self.geometry_column, self.temp_geometry_column

        def run(step: str, sql: str, params=None) -> None:
            self._execute(conn, step, table_name, sql, params)
            if commit_each:
                conn.commit()

        run("drop_table", d.drop_table_sql(schema, table_name))
        run("create_table", d.create_table_sql(schema, table_name, columns, tmp))

        insert = d.insert_sql(schema, table_name, list(columns), tmp)
        for start in range(0, len(rows), self.insert_batch_size):
            run("insert_rows", insert, rows[start:start + self.insert_batch_size])

        run("add_geography_column", d.add_geography_column_sql(schema, table_name, geom))
        run("populate_geography", d.populate_geography_sql(schema, table_name, geom, tmp, WGS84_SRID))
        run("drop_temp_column", d.drop_column_sql(schema, table_name, tmp))

    def load(self, table_name: str, feature_set: FeatureSet) -> int:
        """
        Replace ``schema.table_name`` with the features of ``feature_set``.

        Args:
            table_name: Destination table (unquoted)
            feature_set: Enriched feature set, ideally already WKB-encoded

        Returns:
            Number of rows inserted

        Raises:
            SqlExecutionError: If any step fails (names the step)
        """
        columns = self.plan_columns(table_name, feature_set)
        rows = self.build_rows(feature_set, list(columns))
        label = self._table_label(table_name)

        if not rows:
            self.log.warning(f" - {feature_set.dataset_id} has no features; {label} will be empty.")

        self.log.info(
            f" - Uploading {len(rows)} row(s), {len(columns)} attribute column(s) to {label} "
            f"({self.dialect.name}, {'atomic' if self.atomic else 'per-statement commit'})"
        )

        try:
            if self.atomic:
                with self.engine.begin() as conn:
                    self._run_steps(conn, table_name, columns, rows, commit_each=False)
            else:
                with self.engine.connect() as conn:
                    self._run_steps(conn, table_name, columns, rows, commit_each=True)
        except SQLAlchemyError as e:
            raise SqlExecutionError(
                f"Database connection failed while loading {label}: {e}", table=label
            ) from e

        self.log.info(f" - Successfully loaded {feature_set.dataset_id} into {label}.")
        return len(rows)

    def row_count(self, table_name: str) -> Optional[int]:
        """Count rows of a loaded table (for post-load verification)."""
        sql = f"SELECT COUNT(*) FROM {self.dialect.qualified_table(self.schema, table_name)}"
        with self.engine.connect() as conn:
            return conn.execute(text(sql)).scalar()
