"""Dagster Jobs - Executable Workflows."""

from .ingest_job import vector_ingest_job

__all__ = ["vector_ingest_job"]
