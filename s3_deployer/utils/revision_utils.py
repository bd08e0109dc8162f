"""Revision identifier utilities"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..constants import DATE_FORMAT, DEFAULT_TIME_ZONE, REVISION_PATTERN


def is_valid_revision(revision: Optional[str]) -> bool:
    """
    Check if string is a canonical revision identifier

    Args:
        revision: Candidate revision

    Returns:
        True for a 14 digit timestamp that parses as a real date
    """
    return parse_revision(revision) is not None


def parse_revision(revision: Optional[str]) -> Optional[datetime]:
    """
    Decode the timestamp carried by a revision identifier

    Args:
        revision: Revision identifier

    Returns:
        Naive datetime or None if not a valid revision
    """
    if not revision or not REVISION_PATTERN.match(revision):
        return None
    try:
        return datetime.strptime(revision, DATE_FORMAT)
    except ValueError:
        return None


def generate_revision(time_zone: str = DEFAULT_TIME_ZONE,
                      now: Optional[datetime] = None) -> str:
    """
    Generate a revision identifier from the current time

    Args:
        time_zone: IANA time zone name
        now: Reference time (defaults to the current time)

    Returns:
        Revision identifier
    """
    tz = get_time_zone(time_zone)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.strftime(DATE_FORMAT)


def get_time_zone(name: str) -> ZoneInfo:
    """Resolve an IANA time zone name, raising ValueError if unknown"""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown time zone: {name}") from e
