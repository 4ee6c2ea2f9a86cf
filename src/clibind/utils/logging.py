"""Logging setup for applications built on clibind."""

import logging
import logging.handlers
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: int, log_file: Path | None = None) -> logging.Handler:
    """
    Configure logging for an application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        log_file: Log to this file instead of stderr (optional)

    Returns:
        The handler attached to the root logger
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Rotating file handler (keeps last 5 files, max 10MB each)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_file or '<stderr>'}")
    return handler
