"""
Logging setup for svg_painter.

The writer and camera log through module loggers under the
``svg_painter`` namespace and attach structured fields with
``extra={...}`` (primitive counts, culling normals, camera parameters).
This module renders those fields either as one JSON object per line or
as a compact console line, and times render steps.

Usage:
    from svg_painter.logging_config import setup_logging

    setup_logging(level=logging.DEBUG, json_file="painter.log.json")
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

import numpy as np

PACKAGE_LOGGER = "svg_painter"

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    'message', 'asctime',
}


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Structured fields attached to a record, with numpy values made plain."""
    fields = {}
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS:
            continue
        if isinstance(value, np.ndarray):
            value = value.tolist()
        elif isinstance(value, np.generic):
            value = value.item()
        fields[key] = value
    return fields


def _short_name(name: str) -> str:
    if name.startswith(PACKAGE_LOGGER + "."):
        return name[len(PACKAGE_LOGGER) + 1:]
    return name


class JSONFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message and fields.

    Warnings and errors also carry their source location.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            entry["location"] = f"{record.filename}:{record.lineno}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(record_fields(record))
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL module: message (key=value, ...)``."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    @staticmethod
    def _format_value(value: Any) -> str:
        if isinstance(value, float):
            return f"{value:.4g}"
        if isinstance(value, list) and value and isinstance(value[0], list):
            return f"<{len(value)} points>"
        return str(value)

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_colors and record.levelno in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelno]}{level}{self.RESET}"

        line = (
            f"{datetime.fromtimestamp(record.created):%H:%M:%S} {level} "
            f"{_short_name(record.name)}: {record.getMessage()}"
        )
        fields = record_fields(record)
        if fields:
            line += " (" + ", ".join(
                f"{k}={self._format_value(v)}" for k, v in fields.items()
            ) + ")"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Attach console and/or JSON-file handlers to the ``svg_painter`` logger.

    Previous handlers are replaced, so calling this twice does not
    duplicate output. The package logger stops propagating to the root.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    if console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(handler)

    if json_file:
        handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    logger.propagate = False
    return logger


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log how long the wrapped block took.

    The yielded dict may be filled with extra result fields; they are
    logged together with ``elapsed_seconds`` when the block finishes.
    A failing block is logged at ERROR and the exception re-raised.
    """
    result: Dict[str, Any] = {}
    start = time.perf_counter()
    try:
        yield result
    except Exception as e:
        elapsed = time.perf_counter() - start
        logger.error("%s failed after %.3fs: %s", operation, elapsed, e, extra={
            "operation": operation, "elapsed_seconds": elapsed, **fields,
        })
        raise
    elapsed = time.perf_counter() - start
    result['elapsed_seconds'] = elapsed
    logger.log(level, "%s took %.3fs", operation, elapsed, extra={
        "operation": operation, **fields, **result,
    })
