"""
logging_config.py - Root logger setup shared by the CLI and the API.

Log lines follow `event | key=value | key=value`; with LOG_JSON set each
record is written as one JSON object per line instead.
"""

from __future__ import annotations

import json
import logging
import sys

import config

TEXT_FORMAT = "%(asctime)s [%(name)-20s] %(levelname)-7s %(message)s"
TIME_FORMAT = "%H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, TIME_FORMAT),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = config.LOG_LEVEL
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: int | str | None = None, json_format: bool | None = None) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level number or name. Falls back to LOG_LEVEL.
        json_format: Emit JSON lines. Falls back to LOG_JSON.
    """
    if json_format is None:
        json_format = config.LOG_JSON

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JsonLineFormatter() if json_format else logging.Formatter(TEXT_FORMAT, datefmt=TIME_FORMAT)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
