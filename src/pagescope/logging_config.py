"""Logging configuration for the pagescope command line."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# HTTP and database client loggers that are too chatty below WARNING
NOISY_LOGGERS = ('urllib3', 'charset_normalizer', 'libsql_client')


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: str = LOG_FORMAT,
) -> None:
    """Configure the root logger for a CLI run.

    Modules log through ``logging.getLogger(__name__)``; this only decides
    where those records go and at which level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also append records to this file, creating its directory
        format_string: Record format for every handler
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    # stderr keeps JSON written to stdout parseable
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        handlers=handlers,
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
