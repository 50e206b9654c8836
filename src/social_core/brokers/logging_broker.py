import logging

from ..exceptions.base import FoundationError

logger = logging.getLogger("social_core.services")


class LoggingBroker:
    """
    Reports translated service failures.

    Each call writes one record carrying the exception (with traceback) and,
    for foundation errors, structured context the JSON formatter picks up:
    `error_kind`, `entity`, `error_reason` and `error_data`.
    """

    def __init__(self, logger_: logging.Logger | None = None):
        self.logger = logger_ or logger

    @staticmethod
    def _context(exception: Exception) -> dict:
        if isinstance(exception, FoundationError):
            return {
                "error_kind": exception.kind.value,
                "entity": exception.entity,
                "error_reason": exception.inner.message,
                "error_data": exception.data or None,
            }
        return {"error_kind": type(exception).__name__}

    def log_error(self, exception: Exception) -> None:
        self.logger.error(str(exception), exc_info=exception, extra=self._context(exception))

    def log_critical(self, exception: Exception) -> None:
        self.logger.critical(str(exception), exc_info=exception, extra=self._context(exception))
