"""Logging for tagsmith.

Two destinations hang off the ``tagsmith`` logger:

- a JSONL file at .tagsmith/tagsmith.log with rotation (5MB, 3 backups),
  installed by ``setup_logging``;
- a stderr echo of progress records, installed by ``set_verbose`` for the
  global ``--verbose`` flag.

Progress records are ordinary INFO records tagged with ``extra={"progress": True}``;
``report_progress`` emits them.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import click

_LOGGER_NAME = "tagsmith"
_LOG_FILENAME = "tagsmith.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if getattr(record, "progress", False):
            entry["progress"] = True
        if hasattr(record, "command"):
            entry["command"] = record.command
        if hasattr(record, "args_data"):
            entry["args"] = record.args_data
        if hasattr(record, "error"):
            entry["error"] = record.error
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


class _ProgressHandler(logging.Handler):
    """Echo progress records to stderr as ``tagsmith: <message>``."""

    def __init__(self) -> None:
        super().__init__(logging.INFO)
        self.addFilter(lambda record: bool(getattr(record, "progress", False)))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(f"tagsmith: {record.getMessage()}", err=True)
        except Exception:
            self.handleError(record)


def setup_logging(tagsmith_dir: Path) -> logging.Logger:
    """Set up structured JSON logging to .tagsmith/tagsmith.log.

    Returns the package logger; calling again for the same directory is a no-op.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    log_path = tagsmith_dir / _LOG_FILENAME
    target_filename = os.path.abspath(str(log_path))

    with _setup_lock:
        for h in logger.handlers[:]:
            if not isinstance(h, RotatingFileHandler):
                continue
            if h.baseFilename == target_filename:
                return logger
            # Different path: drop the stale handler.
            logger.removeHandler(h)
            h.close()

        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
        )
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def set_verbose(enabled: bool) -> logging.Logger:
    """Install (or remove) the stderr progress handler. Idempotent."""
    logger = logging.getLogger(_LOGGER_NAME)
    with _setup_lock:
        for h in logger.handlers[:]:
            if isinstance(h, _ProgressHandler):
                logger.removeHandler(h)
        if enabled:
            logger.addHandler(_ProgressHandler())
            if logger.getEffectiveLevel() > logging.INFO:
                logger.setLevel(logging.INFO)
    return logger


def report_progress(logger: logging.Logger, message: str, notify: Callable[[str], None] | None = None) -> None:
    """Log *message* as a progress record and hand it to *notify* if given."""
    logger.info(message, extra={"progress": True})
    if notify is not None:
        notify(message)
