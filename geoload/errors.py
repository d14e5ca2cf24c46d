# =============================================================================
# GeoLoad Errors
# =============================================================================
# Typed failures raised by the per-file pipeline stages. The runner turns
# each of them into a failed FileResult instead of letting them escape.
# =============================================================================

from typing import Optional

from geoload.models.results import ErrorKind

__all__ = [
    "GeoLoadError",
    "SourceReadError",
    "SchemaLookupError",
    "TransformError",
    "SqlExecutionError",
    "OutputWriteError",
    "RunSetupError",
]


class GeoLoadError(Exception):
    """Base class for all loader failures."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


class SourceReadError(GeoLoadError):
    """Input file is unreadable or not parsable as a vector dataset."""

    kind = ErrorKind.SOURCE_READ


class SchemaLookupError(GeoLoadError):
    """Rename-mapping source could not be read."""

    kind = ErrorKind.SCHEMA_LOOKUP


class TransformError(GeoLoadError):
    """Derived field computation, renaming or geometry normalization failed."""

    kind = ErrorKind.TRANSFORM


class OutputWriteError(GeoLoadError):
    """Transformed vector file could not be written."""

    kind = ErrorKind.OUTPUT_WRITE


class SqlExecutionError(GeoLoadError):
    """
    A statement of the table replace-then-convert sequence failed.

    Attributes:
        step: Name of the failed load step (e.g. "drop_table", "insert_rows")
        table: Fully qualified destination table
    """

    kind = ErrorKind.SQL_EXECUTION

    def __init__(self, message: str, step: Optional[str] = None, table: Optional[str] = None):
        super().__init__(message)
        self.step = step
        self.table = table


class RunSetupError(GeoLoadError):
    """Fatal: the run cannot start (input folder or log destination unavailable)."""

    kind = ErrorKind.RUN_SETUP
