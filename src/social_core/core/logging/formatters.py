"""
Formatters used by the logging configuration.

  - JsonFormatter: one JSON object per record, for log collectors.
  - ColorFormatter: compact ANSI-colored lines for a developer terminal.

Both read `request_id` from the record; RequestIdFilter guarantees it is set.
"""

import json
import logging
from typing import Any
from logging import LogRecord
from ...utils.logging import get_project_version

PROJECT_VERSION = get_project_version()

# Attributes every LogRecord carries; anything else on the record came from `extra`
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "request_id"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Emits timestamp, level, logger, message, pathname, lineno, request_id,
    service, env and version, then exception/stack text when present, then
    every `extra` attribute. Extras that are not JSON-serializable are
    converted with str().

    Args:
        env: environment name (ENV setting)
        service: logical service name, usually the project name
        datefmt: passed to logging.Formatter for formatTime()
    """

    def __init__(self, *, env: str | None = None, service: str = "social-core", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_record or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    TIMESTAMP | LEVEL | LOGGER | REQUEST_ID | MESSAGE, with the level colored.
    Exception text follows on the next lines.
    """

    COLOR_CODES = {
        "DEBUG": "\033[36m",      # cyan
        "INFO": "\033[32m",       # green
        "WARNING": "\033[33m",    # yellow
        "ERROR": "\033[31m",      # red
        "CRITICAL": "\033[1;41m", # bold on red
        "RESET": "\033[0m",
    }

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        line = (
            f"{timestamp} | {color}{record.levelname:<8}{reset} | "
            f"{record.name:<40} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            line = line + "\n" + self.formatException(record.exc_info)

        return line
