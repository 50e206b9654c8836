"""
Logging builder: build and apply the dictConfig for the foundation services,
optionally moving handler IO to a background QueueListener.

Settings used:
 - LOG_LEVEL, LOG_FORMAT, LOG_TO_STDOUT, LOG_DIR, ENABLE_SQL_LOGGING, ENV
 - LOG_USE_QUEUE: enqueue records on the producer side, write them from a listener thread
 - LOG_QUEUE_MAX_SIZE: bound of the queue; 0 means unbounded
 - LOG_QUEUE_BLOCKING: with a bounded queue, block producers instead of dropping records

Call stop_queue_logging() at shutdown to flush the listener.
"""

from pathlib import Path
import logging
import logging.config
import queue as _queue
import threading
from logging.handlers import QueueHandler, QueueListener

from ...config.settings import Settings
from ...utils.logging import get_project_name
from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

_QUEUE_LISTENER: QueueListener | None = None
_QUEUE: _queue.Queue | None = None

_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler that drops records instead of blocking when a bounded queue is full.
    Dropped records are counted and reported by get_queue_stats().
    """

    def emit(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(self.prepare(record))
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1
            self.handleError(record)


def get_queue_stats() -> dict:
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping from settings:
      - formatters: "standard" (color in text mode) and "json"
      - filters: "request_id", "redact"
      - handlers: console, plus file/error_file or error_console depending on LOG_TO_STDOUT
      - loggers: root, social_core, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Propagates to root; only the level is set here
            "social_core": {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # SQL statements may contain personal data
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def _start_queue_logging(settings: Settings) -> None:
    global _QUEUE_LISTENER, _QUEUE

    root_logger = logging.getLogger()
    current_handlers = list(root_logger.handlers)
    if not current_handlers:
        return

    # Real handlers must only run in the listener thread
    moved = set(current_handlers)
    for logger_obj in list(logging.Logger.manager.loggerDict.values()):
        if isinstance(logger_obj, logging.Logger):
            for handler in list(logger_obj.handlers):
                if handler in moved:
                    logger_obj.removeHandler(handler)
    for handler in current_handlers:
        root_logger.removeHandler(handler)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size if max_size > 0 else 0)

    if max_size > 0 and not settings.LOG_QUEUE_BLOCKING:
        queue_handler: QueueHandler = NonBlockingQueueHandler(log_queue)
    else:
        queue_handler = QueueHandler(log_queue)

    # Producer-side filters: contextvars are only visible in the producing task
    queue_handler.addFilter(RequestIdFilter())
    queue_handler.addFilter(RedactFilter())

    listener = QueueListener(log_queue, *current_handlers, respect_handler_level=True)
    listener.start()
    root_logger.addHandler(queue_handler)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration.

    1. Create LOG_DIR when logging to files.
    2. dictConfig(make_dict_config(settings)).
    3. Add a RequestIdFilter on the root logger so %(request_id)s always resolves.
    4. With LOG_USE_QUEUE, hand the real handlers to a QueueListener.
    """
    stop_queue_logging()

    if (not settings.LOG_TO_STDOUT) and settings.LOG_DIR:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())

    if settings.LOG_USE_QUEUE:
        _start_queue_logging(settings)


def stop_queue_logging() -> None:
    """Stop the QueueListener (flushing queued records) and forget it."""
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None
