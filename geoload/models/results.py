# =============================================================================
# Run Result Models
# =============================================================================
# Per-file outcome and batch aggregation for the loader pipeline:
# - FileStage: Per-file state machine stages
# - ErrorKind: Classification of per-file failures
# - FileResult: Outcome of one file (success or typed failure)
# - BatchReport: Aggregated outcomes of a run
# =============================================================================

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

__all__ = ["FileStage", "ErrorKind", "FileResult", "BatchReport"]


class FileStage(str, Enum):
    """
    Per-file processing stages.

    PENDING → LOADED → ENRICHED → NORMALIZED → UPLOADED → DONE, with FAILED
    reachable from any non-terminal stage.
    """

    PENDING = "pending"
    LOADED = "loaded"
    ENRICHED = "enriched"
    NORMALIZED = "normalized"
    UPLOADED = "uploaded"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStage.DONE, FileStage.FAILED)


class ErrorKind(str, Enum):
    """Failure classification used in FileResult and GeoLoadError subclasses."""

    SOURCE_READ = "source_read"
    SCHEMA_LOOKUP = "schema_lookup"
    TRANSFORM = "transform"
    OUTPUT_WRITE = "output_write"
    SQL_EXECUTION = "sql_execution"
    RUN_SETUP = "run_setup"
    UNEXPECTED = "unexpected"


class FileResult(BaseModel):
    """
    Outcome of processing a single input file.

    Attributes:
        path: Input file path
        dataset_id: File base name without extension (also the table name)
        stage: Final stage reached (DONE or FAILED)
        failed_stage: Last stage reached before the failure, if any
        error_kind: Failure classification, if any
        message: Failure message, if any
        feature_count: Number of features read from the file
        row_count: Number of rows inserted into the destination table
        output_path: Transformed vector file, when one was published
    """

    path: str = Field(..., description="Input file path")
    dataset_id: str = Field(..., description="File base name without extension")
    stage: FileStage = Field(FileStage.PENDING, description="Final stage reached")
    failed_stage: Optional[FileStage] = Field(None, description="Stage reached before failure")
    error_kind: Optional[ErrorKind] = Field(None, description="Failure classification")
    message: Optional[str] = Field(None, description="Failure message")
    feature_count: int = Field(0, ge=0)
    row_count: int = Field(0, ge=0)
    output_path: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.stage == FileStage.DONE


class BatchReport(BaseModel):
    """Aggregated outcomes of one loader run, in processing order."""

    results: List[FileResult] = Field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.results.append(result)

    @property
    def succeeded(self) -> List[FileResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failed(self) -> List[FileResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        """One-line summary suitable for the closing log line of a run."""
        line = f"{len(self.succeeded)}/{self.total} file(s) loaded successfully"
        if self.failed:
            names = ", ".join(r.dataset_id for r in self.failed)
            line += f"; failed: {names}"
        return line
