"""Logging utilities for the hook engine.

Engine modules obtain loggers through :func:`get_logger`; applications call
:func:`setup_logging` once with the ``[logging]`` section of their config.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, TypedDict

from pydantic import BaseModel


class LoggingSetupConfig(TypedDict, total=False):
    """Configuration options for :func:`setup_logging`.

    Attributes:
        level: Logging level name (e.g. ``"INFO"``) or integer level.
        format: Logging formatter pattern for text output.
        file_path: Optional file path for file handler output.
        json_format: Whether to output logs as JSON lines.
    """

    level: str | int
    format: str
    file_path: str
    json_format: bool


_DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
_RESERVED_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Format log records as one-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_FIELDS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=repr)


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name."""
    return logging.getLogger(name)


def setup_logging(config: Mapping[str, Any] | BaseModel | None = None) -> None:
    """Configure root logging handlers and formatter.

    Existing root handlers are removed and closed before the new setup is
    applied, so calling this more than once is safe.

    Args:
        config: Mapping with logging options, or a ``LoggingConfig`` model.
    """
    if isinstance(config, BaseModel):
        conf = config.model_dump(exclude_none=True)
    else:
        conf = dict(config or {})

    level = parse_level(conf.get("level", "INFO"))
    text_format = str(conf.get("format", _DEFAULT_FORMAT))
    file_path = conf.get("file_path")
    json_format = bool(conf.get("json_format", False))

    root_logger = logging.getLogger()

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(level)

    formatter: logging.Formatter
    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(text_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if isinstance(file_path, str) and file_path:
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def parse_level(level: str | int) -> int:
    """Convert level setting into a logging level integer."""
    if isinstance(level, int):
        return level

    parsed_level = logging.getLevelName(level.upper())
    if isinstance(parsed_level, int):
        return parsed_level

    return logging.INFO
