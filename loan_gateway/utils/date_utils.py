"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def millis(ms: int) -> timedelta:
    """Convert a millisecond setting into a timedelta"""
    return timedelta(milliseconds=ms)
