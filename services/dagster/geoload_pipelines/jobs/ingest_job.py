"""Vector ingestion job (op-based).

Enumerates the input folder and loads every vector file into its own
geography table in the spatial database.
"""

from dagster import job

from ..ops import discover_vector_files, load_vector_batch


@job(
    name="vector_ingest_job",
    description="Loads vector files from the input folder into per-dataset geography tables",
)
def vector_ingest_job():
    """
    Batch ingestion job.

    Pipeline flow:
    1. discover_vector_files: Lists input files matching the configured patterns
    2. load_vector_batch: Read, reproject, rename/enrich, write and load each file

    Per-file failures are recorded in the batch report; the job itself fails
    only on setup errors (missing input folder, unopenable log file).
    """
    load_vector_batch(discover_vector_files())
