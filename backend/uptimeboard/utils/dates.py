"""Datetime helpers."""
from datetime import datetime, timezone
from typing import Optional


def ensure_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Read naive datetimes as UTC; aware ones are returned unchanged."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
