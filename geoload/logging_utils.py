# =============================================================================
# Run Logging
# =============================================================================
# Run-scoped, timestamped log file attached to a logger for the duration of
# a loader run and released on exit, even when files fail.
# =============================================================================

import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional

from geoload.errors import RunSetupError

__all__ = ["run_log_scope", "LOG_FORMAT"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


@contextmanager
def run_log_scope(
    log_folder: Optional[str],
    prefix: str = "geoload",
    logger: Optional[logging.Logger] = None,
) -> Generator[logging.Logger, None, None]:
    """
    Mirror a logger into ``<log_folder>/<prefix>_log_<YYYYmmdd_HHMMSS>.txt``.

    The file handler is removed and closed on exit regardless of errors.
    With ``log_folder=None`` the logger is yielded without a file handler.

    Args:
        log_folder: Folder for the log file (created if missing), or None
        prefix: File name prefix
        logger: Logger to attach to (default: the "geoload" package logger)

    Yields:
        The logger, for passing to the runner as its ``log``

    Raises:
        RunSetupError: If the log file cannot be opened

    Example:
        >>> with run_log_scope("logs") as log:
        ...     PipelineRunner(..., log=log).run(paths)
    """
    logger = logger or logging.getLogger("geoload")
    if log_folder is None:
        yield logger
        return

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = Path(log_folder) / f"{prefix}_log_{timestamp}.txt"
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise RunSetupError(f"Cannot open log file {log_path}: {e}") from e

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    previous_level = logger.level
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    try:
        logger.info(f"Log started: {datetime.now()} ({log_path})")
        yield logger
    finally:
        logger.info(f"Log finished: {datetime.now()}")
        logger.removeHandler(handler)
        handler.close()
        logger.setLevel(previous_level)
