"""Formatting utilities for display"""

from datetime import datetime
from typing import Optional

from ..constants import DISPLAY_DATE_FORMAT


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable format

    Examples:
        >>> format_duration(1.5)
        '1.5s'
        >>> format_duration(65)
        '1m 5s'
    """
    if seconds < 0:
        return "Invalid duration"

    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a decoded revision timestamp, '-' when unknown"""
    if value is None:
        return "-"
    return value.strftime(DISPLAY_DATE_FORMAT)


def short_sha(sha: Optional[str], length: int = 7) -> str:
    """Abbreviate a commit id for display"""
    if not sha:
        return "-"
    return sha[:length]


def pluralize(count: int, singular: str, plural: str = None) -> str:
    """Pluralize a word based on count

    Args:
        count: Number of items
        singular: Singular form
        plural: Plural form (optional, will add 's' if not provided)

    Returns:
        Pluralized string with count
    """
    if plural is None:
        plural = singular + 's'

    word = singular if count == 1 else plural
    return f"{count} {word}"
