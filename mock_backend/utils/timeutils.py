"""Time helpers shared by stores, trackers and generators"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def isoformat(value: datetime) -> str:
    """ISO-8601 string without microseconds"""
    return value.replace(microsecond=0).isoformat()


def now_iso() -> str:
    return isoformat(utcnow())
