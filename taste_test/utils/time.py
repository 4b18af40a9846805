from datetime import datetime
import pytz

UTC = pytz.UTC


def now_utc():
    """
    Current time as a timezone-aware UTC datetime.
    """
    return datetime.now(UTC)


def timestamp():
    """
    Returns the current UTC time as an ISO-8601 string.
    Used for chat entry and profile row timestamps.
    """
    return now_utc().isoformat()
