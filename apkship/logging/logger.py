# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Logger factory for apkship.

Release runs are mostly watched by a human in a terminal, so the default
output is one readable progress line per event:

  INFO  Keystore created keystore=signing/app-release.keystore

CI systems that collect logs can switch to JSON lines with
`log_format: json`, which produces:

  {"ts": "2026-...", "level": "INFO", "module": "apkship.stages.keystore", "msg": "Keystore created", ...}

How this works:
  - Python's standard `logging` module does the plumbing; we only swap the
    formatter.
  - One handler for stdout, plus an optional file handler.
  - `get_logger` is the only way to create loggers. `configure_logging`
    re-levels and re-formats every apkship logger once the config is known.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

_ROOT_LOGGER_NAME = "apkship"

# LogRecord attributes that are not caller-supplied `extra` fields.
_STANDARD_ATTRS: frozenset[str] = frozenset({
    "name",
    "msg",
    "args",
    "created",
    "relativeCreated",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "pathname",
    "filename",
    "module",
    "levelno",
    "levelname",
    "processName",
    "process",
    "threadName",
    "thread",
    "message",
    "msecs",
    "taskName",
})


def _extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class ConsoleFormatter(logging.Formatter):
    """
    Formats log records as a single human-readable line.

    The level is padded so messages line up, and any `extra` fields follow
    the message as key=value pairs in the order they were passed.
    Tracebacks, when present, are appended on the following lines.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:<5} {record.getMessage()}"
        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{key}={value}" for key, value in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Each entry carries four fixed fields:
      ts    : ISO 8601 UTC timestamp
      level : log level name
      module: the logger name
      msg   : the formatted message string

    Extra fields passed via `extra=` are merged in alongside them.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }
        entry.update(_extra_fields(record))
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "text": ConsoleFormatter,
    "json": JsonFormatter,
}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _resolve_formatter(log_format: str) -> logging.Formatter:
    try:
        return _FORMATTERS[log_format]()
    except KeyError:
        raise ValueError(
            f"Invalid log format '{log_format}'. Must be one of: {', '.join(sorted(_FORMATTERS))}"
        ) from None


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    log_format: str = "text",
) -> logging.Logger:
    """
    Create a logger that writes to stdout (and optionally a file).

    Every module calls this once at the top and keeps the returned instance.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.
        log_format: "text" for progress lines, "json" for JSON lines.

    Returns:
        A configured logging.Logger.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Avoid stacking handlers if get_logger is called multiple times for the
    # same name (happens in tests).
    if logger.handlers:
        return logger

    formatter = _resolve_formatter(log_format)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[Path] = None,
) -> None:
    """
    Apply level, format and optional file output to every apkship logger.

    Module loggers are created at import time with defaults, before the CLI
    has read `--log-level` or the config. This walks the ones that exist and
    brings them in line. A file handler is only added once per logger.
    """
    level = _resolve_log_level(log_level)
    formatter = _resolve_formatter(log_format)

    for name in list(logging.Logger.manager.loggerDict):
        if name != _ROOT_LOGGER_NAME and not name.startswith(_ROOT_LOGGER_NAME + "."):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(level)
        has_file_handler = False
        for handler in logger.handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            if isinstance(handler, logging.FileHandler):
                has_file_handler = True
        if log_file is not None and not has_file_handler:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
