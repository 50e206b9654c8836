# core/logging/
# ├─ builder.py      make_dict_config(settings), setup_logging(settings), queue mode
# ├─ formatters.py   JsonFormatter, ColorFormatter
# ├─ filters.py      RequestIdFilter, RedactFilter, request id contextvar helpers
# └─ handlers.py     handler config factories for dictConfig

from .builder import setup_logging, make_dict_config, stop_queue_logging
from .filters import set_request_id, reset_request_id, get_request_id, RequestIdFilter

__all__ = [
    "setup_logging",
    "make_dict_config",
    "stop_queue_logging",
    "set_request_id",
    "reset_request_id",
    "get_request_id",
    "RequestIdFilter",
]
