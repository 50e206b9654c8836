"""
Logging filters.

RequestIdFilter stamps a correlation id on every record. The id lives in a
ContextVar so it follows the current asyncio task across awaits; callers set it
around a unit of work:

    token = set_request_id("import-42")
    try:
        await service.add_post(post)
    finally:
        reset_request_id(token)

RedactFilter masks values of sensitive attributes (passwords, tokens, ...)
before a record reaches any handler.
"""

import logging
from logging import LogRecord
import contextvars

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id for the current context; returns the token for reset_request_id()."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantees `record.request_id`: an explicit `extra={"request_id": ...}` wins,
    then the contextvar, then "-". Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "ssn", "authorization"}

    def _scrub(self, value):
        if isinstance(value, dict):
            return {
                k: REDACTED if str(k).lower() in self.SENSITIVE else self._scrub(v)
                for k, v in value.items()
            }
        return value

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = REDACTED
            elif isinstance(record.__dict__[key], dict):
                record.__dict__[key] = self._scrub(record.__dict__[key])
        return True
