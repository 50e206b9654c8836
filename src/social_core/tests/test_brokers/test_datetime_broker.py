from datetime import datetime, timedelta, timezone

from social_core.brokers.datetime_broker import DateTimeBroker


def test_current_datetime_is_timezone_aware_utc():
    # Act
    current = DateTimeBroker().get_current_datetime()

    # Assert
    assert current.tzinfo is not None
    assert current.utcoffset() == timedelta(0)
    assert abs(datetime.now(timezone.utc) - current) < timedelta(seconds=5)
