# =============================================================================
# Pipeline Runner - Per-file Load Orchestration
# =============================================================================
# Drives each input file through:
#   PENDING → LOADED → ENRICHED → NORMALIZED → UPLOADED → DONE (or FAILED)
# and aggregates one FileResult per file into a BatchReport.
# =============================================================================

import logging
import traceback
from pathlib import Path
from typing import Callable, Iterable, Optional

from geoload.errors import GeoLoadError, OutputWriteError
from geoload.models import (
    BatchReport,
    ErrorKind,
    FeatureSet,
    FileResult,
    FileStage,
    OutputFormat,
)
from geoload.spatial_utils import (
    GeometryNormalizer,
    SchemaMapper,
    SpatialTableLoader,
    dataset_id_for,
    read_feature_set,
    write_feature_set,
)
from geoload.transformations import AttributeEnricher

__all__ = ["PipelineRunner"]

logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Sequential, failure-isolating batch runner.

    Every file gets exactly one attempt. A failure in any stage is recorded
    as a failed FileResult (with the stage reached and the error kind) and
    the runner moves on; nothing short of a setup error stops the batch.

    When ``output_folder`` is set, the transformed file is written under a
    staging name before upload and moved into place only after the table
    load succeeds, so failed files leave no output file.

    Args:
        mapper: SchemaMapper providing rename mappings
        loader: SpatialTableLoader for the destination database
        output_folder: Folder for transformed vector files (None disables output)
        output_format: Format of the transformed vector files
        normalizer: GeometryNormalizer (default: WGS84)
        enricher: AttributeEnricher
        reader: Callable reading a path into a FeatureSet
        writer: Callable writing a FeatureSet to a path
        log: Logger-like object (logging.Logger or Dagster context.log)
    """

    def __init__(
        self,
        mapper: SchemaMapper,
        loader: SpatialTableLoader,
        output_folder: Optional[str] = None,
        output_format: OutputFormat = OutputFormat.GEOJSON,
        normalizer: Optional[GeometryNormalizer] = None,
        enricher: Optional[AttributeEnricher] = None,
        reader: Callable[[str], FeatureSet] = read_feature_set,
        writer: Callable[..., str] = write_feature_set,
        log=None,
    ):
        self.log = log or logger
        self.mapper = mapper
        self.loader = loader
        self.output_folder = output_folder
        self.output_format = output_format
        self.normalizer = normalizer or GeometryNormalizer(log=self.log)
        self.enricher = enricher or AttributeEnricher(log=self.log)
        self.reader = reader
        self.writer = writer

    # -------------------------------------------------------------------------
    # Output staging
    # -------------------------------------------------------------------------

    def _output_paths(self, dataset_id: str):
        folder = Path(self.output_folder)
        ext = self.output_format.extension
        return folder / f"{dataset_id}.partial{ext}", folder / f"{dataset_id}{ext}"

    def _discard(self, staged: Optional[Path]) -> None:
        if staged is not None and staged.exists():
            try:
                staged.unlink()
            except OSError as e:
                self.log.warning(f" - Could not remove staged output {staged}: {e}")

    # -------------------------------------------------------------------------
    # Per-file processing
    # -------------------------------------------------------------------------

    def _fail(
        self,
        result: FileResult,
        stage: FileStage,
        kind: ErrorKind,
        message: str,
        staged: Optional[Path],
    ) -> FileResult:
        self._discard(staged)
        result.stage = FileStage.FAILED
        result.failed_stage = stage
        result.error_kind = kind
        result.message = message
        self.log.error(
            f"Failed to process {Path(result.path).name} (after {stage.value}, {kind.value}): {message}"
        )
        return result

    def process_file(self, path: str) -> FileResult:
        """
        Run one file through every stage.

        Args:
            path: Input vector file

        Returns:
            FileResult with stage DONE, or FAILED plus the stage reached and error kind
        """
        dataset_id = dataset_id_for(path)
        result = FileResult(path=str(path), dataset_id=dataset_id)
        stage = FileStage.PENDING
        staged: Optional[Path] = None
        self.log.info(f"Processing: {Path(path).name}")

        try:
            feature_set = self.reader(path)
            result.feature_count = len(feature_set)
            stage = FileStage.LOADED
            self.log.info(f" - Vector file loaded successfully ({len(feature_set)} feature(s)).")

            feature_set = self.normalizer.reproject(feature_set)
            mapping = self.mapper.lookup(dataset_id)
            feature_set = self.enricher.enrich(feature_set, mapping)
            stage = FileStage.ENRICHED

            feature_set = self.normalizer.encode(feature_set)
            if self.output_folder is not None:
                staged, final = self._output_paths(dataset_id)
                self.writer(feature_set, str(staged), self.output_format)
            stage = FileStage.NORMALIZED

            result.row_count = self.loader.load(dataset_id, feature_set)
            stage = FileStage.UPLOADED

            if staged is not None:
                try:
                    staged.replace(final)
                except OSError as e:
                    raise OutputWriteError(f"Cannot publish output file {final}: {e}") from e
                staged = None
                result.output_path = str(final)
                self.log.info(f" - Saved updated file to: {final}")
        except GeoLoadError as e:
            return self._fail(result, stage, e.kind, str(e), staged)
        except Exception as e:
            self.log.error(traceback.format_exc())
            return self._fail(
                result, stage, ErrorKind.UNEXPECTED, f"{type(e).__name__}: {e}", staged
            )

        result.stage = FileStage.DONE
        return result

    def run(self, paths: Iterable[str]) -> BatchReport:
        """
        Process every path in order and aggregate the outcomes.

        Args:
            paths: Enumerated input files

        Returns:
            BatchReport with one FileResult per path
        """
        self.mapper.preload()
        paths = list(paths)
        names = ", ".join(Path(p).name for p in paths)
        self.log.info(f"Found {len(paths)} vector file(s): {names}")

        report = BatchReport()
        for path in paths:
            report.add(self.process_file(path))

        if report.all_succeeded:
            self.log.info(f"All done! {report.summary()}")
        else:
            self.log.warning(f"Run finished with failures: {report.summary()}")
        return report
