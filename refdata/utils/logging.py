"""
Logging setup for the refdata CLI and library.

Engine and pipeline modules log through `get_logger(__name__)` and attach the
record context (`kind`, `operation`, `record_id`, `failure_kind`, `field`)
with `extra=`. The console format prints the message only; the JSON format
lifts every such attribute into the emitted object so rejections can be
filtered by kind or failure class downstream.

The CLI calls `configure_from_settings` once per command; library callers are
free to configure logging themselves and never need to touch this module.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from refdata.config import Settings

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def _json_formatter(record: logging.LogRecord) -> str:
    payload: Dict[str, Any] = {
        "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    for key, value in vars(record).items():
        if key not in _RESERVED_ATTRS:
            payload[key] = value
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with `extra=` context promoted to top-level keys."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Install a single stderr handler on the root logger.

    Parameters
    ----------
    level : str
        Level name applied to both the root logger and the handler.
    json_logs : bool
        Emit `JsonFormatter` output instead of the pipe-separated console format.
    force : bool
        Replace an existing configuration. With False, a root logger that
        already has handlers (pytest's caplog, an embedding application) is
        left as it is.
    """
    if not force and logging.getLogger().handlers:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "console",
                    "level": level,
                }
            },
            "root": {"handlers": ["stderr"], "level": level},
        }
    )


def configure_from_settings(settings: "Settings") -> None:
    """Apply `LOG_LEVEL` and `JSON_LOGS` from the application settings."""
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_from_settings", "configure_logging", "get_logger", "JsonFormatter"]
