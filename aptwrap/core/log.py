"""Logging setup for the command line front end."""

import logging
from pathlib import Path

LOG_DIR = Path.home() / ".cache" / "aptwrap"
LOG_FILE = LOG_DIR / "aptwrap.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(level: str | int = "INFO", log_file: Path | None = None) -> Path:
    """
    Send aptwrap logs to a file.

    Library code only creates loggers; this is called by the CLI.

    Returns:
        The log file in use
    """
    if log_file is None:
        log_file = LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("aptwrap")
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(level)

    return log_file
