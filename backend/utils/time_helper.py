"""
Timestamp helper for audit columns.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime.

    SQLite drops tzinfo on storage, so timestamps are kept naive everywhere
    to compare equal before and after a round trip.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
