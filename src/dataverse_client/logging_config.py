"""Logging setup for the dataverse-client command line.

Library modules only create named loggers under ``dataverse_client``
(``dataverse_client.request``, ``dataverse_client.config``, ...). Nothing is
configured on import; the CLI calls ``setup_logging`` once, so request and
config messages go to stderr while command output stays on stdout.
"""

import logging
import sys
from pathlib import Path

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    format_string: str | None = None
) -> logging.Logger:
    """Route dataverse_client log records to stderr and, optionally, a file.

    Calling it again replaces the previous handlers, so repeated CLI runs in
    one process do not duplicate output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (logs to stderr if not specified)
        format_string: Optional custom format string

    Returns:
        Configured package logger
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT
    log_level = getattr(logging, level.upper())

    logger = logging.getLogger("dataverse_client")
    logger.setLevel(log_level)

    logger.handlers.clear()

    formatter = logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
