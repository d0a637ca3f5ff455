"""
Shared utility functions.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Get current UTC date, the key of the daily FX snapshot."""
    return utc_now().date()


def truncate(text: str, limit: int, marker: str = "...") -> str:
    """Cut text to limit characters, appending marker when anything was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker
