from .storage_broker import StorageBroker
from .datetime_broker import DateTimeBroker
from .logging_broker import LoggingBroker

__all__ = [
    "StorageBroker",
    "DateTimeBroker",
    "LoggingBroker",
]
