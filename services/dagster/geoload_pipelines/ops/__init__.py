"""Dagster Ops - Reusable Computation Units."""

from .discover_op import discover_vector_files
from .load_op import load_vector_batch

__all__ = [
    "discover_vector_files",
    "load_vector_batch",
]
