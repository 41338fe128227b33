"""
Utility functions and helpers
"""

from datetime import datetime, timezone

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with millisecond precision and a Z suffix"""
    # Naive values from the database are stored in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")
