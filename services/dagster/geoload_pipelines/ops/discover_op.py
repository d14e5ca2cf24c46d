# =============================================================================
# Discover Op - Input Folder Enumeration
# =============================================================================
# Lists the vector files of the input folder for one loader run.
# =============================================================================

from typing import List

from dagster import Config, OpExecutionContext, Out, op

from geoload.spatial_utils import discover_vector_files as list_vector_files


class DiscoverConfig(Config):
    """Run config for input enumeration."""

    input_folder: str
    file_patterns: List[str] = ["*.geojson"]


def _discover_vector_files(input_folder: str, file_patterns: List[str], log) -> List[str]:
    """
    Core logic for enumerating input files.

    This function is extracted for easier unit testing without Dagster context.

    Args:
        input_folder: Folder holding the input vector files
        file_patterns: Glob patterns to match
        log: Logger instance (context.log)

    Returns:
        Sorted list of file paths (possibly empty)

    Raises:
        RunSetupError: If the input folder cannot be enumerated
    """
    paths = list_vector_files(input_folder, file_patterns)
    if not paths:
        log.warning(f"No files matching {file_patterns} found in {input_folder}")
    else:
        log.info(f"Discovered {len(paths)} input file(s) in {input_folder}")
    return paths


@op(out={"paths": Out(dagster_type=list)})
def discover_vector_files(context: OpExecutionContext, config: DiscoverConfig) -> list:
    """
    Enumerate the input vector files of a run.

    Args:
        context: Dagster op execution context
        config: Input folder and file patterns

    Returns:
        List of input file paths
    """
    return _discover_vector_files(
        input_folder=config.input_folder,
        file_patterns=config.file_patterns,
        log=context.log,
    )
