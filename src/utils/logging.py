"""Logging utilities built on top of :mod:`loguru`."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[logger]} - {message}"


class LoguruHandler(logging.Handler):
    """Forward standard-library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(logger=record.name).opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure loguru sinks and route the ``logging`` module through them."""

    logger.remove()
    logger.configure(extra={"logger": "rom-catalog"})
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=level, format=LOG_FORMAT, encoding="utf-8")
    logging.basicConfig(handlers=[LoguruHandler()], level=level, force=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a standard-library logger tied to loguru."""

    return logging.getLogger(name or __name__)
