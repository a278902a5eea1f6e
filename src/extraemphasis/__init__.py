"""extra-emphasis - user-defined inline emphasis markers for light markup.

Extends a lightweight markup language with configurable marker pairs
(``!!red!!``, ``!@blue!@``, ...) that are styled while editing and
translated into backend-specific styled spans on export.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


def _setup_logging(log_dir: Path = Path("logs"), verbose: bool = False) -> None:
    """Send package logs to a rotating per-process file and to stderr.

    Handlers are installed on the first call only.
    """
    logger = logging.getLogger(__name__)
    if logger.handlers:
        return
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"extraemphasis.{os.getpid()}.log"

    # Everything goes to the file (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))

    # Console shows warnings unless --verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.debug("Logging configured. Log file: %s", log_file.absolute())
