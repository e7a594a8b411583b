"""Time-related helper utilities."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current timezone-aware UTC timestamp."""
    return datetime.now(tz=timezone.utc)


def format_clock(timestamp: datetime) -> str:
    """Render a timestamp as a local ``HH:MM`` clock reading."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.strftime("%H:%M")
