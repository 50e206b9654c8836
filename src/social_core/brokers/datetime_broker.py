from datetime import datetime, timezone


class DateTimeBroker:
    """Source of the current time, swapped for a fixed clock in tests."""

    def get_current_datetime(self) -> datetime:
        return datetime.now(timezone.utc)
