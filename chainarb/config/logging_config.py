"""Logging configuration using Loguru."""

import sys
from pathlib import Path

from loguru import logger

from chainarb.config.settings import Settings, settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def error_log_path(log_file: str | Path) -> Path:
    """Error log written next to the main log, e.g. chainarb.errors.log."""
    path = Path(log_file)
    return path.with_name(f"{path.stem}.errors{path.suffix or '.log'}")


def setup_logging(config: Settings | None = None, level: str | None = None) -> None:
    """
    Configure logging for the scanner.

    The console gets ``level`` (or LOG_LEVEL). When LOG_FILE is set, a rotating
    DEBUG log and an ERROR log with tracebacks are written beside it; an empty
    LOG_FILE keeps output on the console only.

    Args:
        config: Settings to read LOG_LEVEL and LOG_FILE from, defaults to the global settings
        level: Console level override, e.g. from the --log-level flag
    """
    config = config or settings
    console_level = (level or config.LOG_LEVEL).upper()

    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    if not config.LOG_FILE:
        logger.info(f"Logging configured: console {console_level}, no log file")
        return

    log_file = Path(config.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Full scan trace, venue fetch details included
    logger.add(
        log_file,
        rotation="10 MB",
        retention="7 days",
        level="DEBUG",
        format=FILE_FORMAT,
        compression="zip",
    )
    logger.add(
        error_log_path(log_file),
        rotation="10 MB",
        retention="30 days",
        level="ERROR",
        format=FILE_FORMAT + "\n{exception}",
        backtrace=True,
        diagnose=False,
    )

    logger.info(f"Logging configured: console {console_level}, file {log_file}")
