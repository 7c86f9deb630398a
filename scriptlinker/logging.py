"""Logging utilities for scriptlinker commands."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

_LOGGER_NAME = "scriptlinker"
_CONSOLE_FORMAT = "[scriptlinker] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the scriptlinker hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_log_path(log_file: str | Path, today: date | None = None) -> Path:
    """Return the file to log into.

    A directory (existing, or spelled with a trailing separator) receives one
    ``scriptlinker-YYYY-MM-DD.log`` file per day; anything else is used as is.
    """
    path = Path(log_file).expanduser()
    if path.is_dir() or str(log_file).endswith(("/", "\\")):
        stamp = (today or date.today()).isoformat()
        return path / f"{_LOGGER_NAME}-{stamp}.log"
    return path


def configure_logging(
    *, verbose: bool = False, log_file: str | Path | None = None
) -> logging.Logger:
    """Configure console output and, when ``log_file`` is set, an appending file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # The CLI may configure more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        path = resolve_log_path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        # The file always gets debug detail, whatever the console shows.
        logger.setLevel(logging.DEBUG)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_log_path"]
