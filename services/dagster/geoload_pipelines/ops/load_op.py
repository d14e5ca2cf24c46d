# =============================================================================
# Load Op - Vector Files to Spatial Database
# =============================================================================
# Runs every enumerated file through read → reproject → rename/enrich →
# write → geography table load, one file at a time, and reports the outcome
# of each file.
# =============================================================================

from typing import Any, Dict, List, Optional

from dagster import Config, In, OpExecutionContext, Out, get_dagster_logger, op

from geoload.logging_utils import run_log_scope
from geoload.models import OutputFormat
from geoload.runner import PipelineRunner


class LoadBatchConfig(Config):
    """Run config for the batch load."""

    output_folder: Optional[str] = None
    output_format: str = OutputFormat.GEOJSON.value
    log_folder: Optional[str] = None


def _load_vector_batch(
    spatial_db,
    schema_mapper,
    paths: List[str],
    output_folder: Optional[str],
    output_format: str,
    log_folder: Optional[str],
    log,
) -> Dict[str, Any]:
    """
    Core logic for loading a batch of vector files.

    This function is extracted for easier unit testing without Dagster context.

    Files are processed sequentially; a failed file is recorded in the
    report and never stops the batch.

    Args:
        spatial_db: SpatialDatabaseResource instance
        schema_mapper: SchemaMapperResource instance
        paths: Input file paths
        output_folder: Folder for transformed files (None disables output)
        output_format: "geojson" or "gpkg"
        log_folder: Folder for the run log file (None disables the file)
        log: logging.Logger for progress lines

    Returns:
        Report dict with "results" (one entry per file), "succeeded",
        "failed" and "summary"

    Raises:
        RunSetupError: If the run log file cannot be opened
    """
    fmt = OutputFormat(output_format)

    with run_log_scope(log_folder, logger=log) as run_log:
        runner = PipelineRunner(
            mapper=schema_mapper.get_mapper(log=run_log),
            loader=spatial_db.get_loader(log=run_log),
            output_folder=output_folder,
            output_format=fmt,
            log=run_log,
        )
        report = runner.run(paths)

    return {
        "results": [r.model_dump(mode="json") for r in report.results],
        "succeeded": len(report.succeeded),
        "failed": [r.dataset_id for r in report.failed],
        "summary": report.summary(),
    }


@op(
    ins={"paths": In(dagster_type=list)},
    out={"report": Out(dagster_type=dict)},
    required_resource_keys={"spatial_db", "schema_mapper"},
)
def load_vector_batch(context: OpExecutionContext, config: LoadBatchConfig, paths: list) -> dict:
    """
    Load every input file into its own geography table.

    Args:
        context: Dagster op execution context
        config: Output folder/format and log folder
        paths: Input file paths from discover_vector_files

    Returns:
        Batch report dict (see _load_vector_batch)
    """
    report = _load_vector_batch(
        spatial_db=context.resources.spatial_db,
        schema_mapper=context.resources.schema_mapper,
        paths=paths,
        output_folder=config.output_folder,
        output_format=config.output_format,
        log_folder=config.log_folder,
        log=get_dagster_logger(),
    )
    context.log.info(report["summary"])
    return report
