"""Utility functions for date operations."""

import logging
from datetime import datetime, timezone

import dateutil.parser

logger = logging.getLogger("mcp-jira")

SECONDS_PER_DAY = 24 * 60 * 60


def parse_datetime(date_str: str | None) -> datetime | None:
    """
    Parse a Jira date string into a timezone-aware datetime.

    The input string `date_str` accepts:
    - None or empty string
    - Epoch timestamp (only contains digits and is in milliseconds)
    - Other formats supported by `dateutil.parser` (ISO 8601, RFC 3339,
      Jira's ``2024-01-02T15:30:00.000+0000``)

    Naive results are assumed to be UTC.

    Args:
        date_str: Date string

    Returns:
        Aware datetime, or None if date_str is empty or cannot be parsed
    """
    if not date_str:
        return None

    try:
        if date_str.isdigit():
            return datetime.fromtimestamp(int(date_str) / 1000, tz=timezone.utc)
        date = dateutil.parser.parse(date_str)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"TRACE utils.parse_datetime - error parsing '{date_str}': {e}")
        return None

    if date.tzinfo is None:
        date = date.replace(tzinfo=timezone.utc)
    return date


def days_since(date_str: str | None, now: datetime | None = None) -> int | None:
    """
    Count whole days elapsed between a date string and ``now``.

    Partial days are floored, so an issue updated 4 days and 23 hours ago
    reports 4.

    Args:
        date_str: The earlier date string
        now: Reference point (default: current UTC time)

    Returns:
        Number of whole days, or None if the date cannot be parsed
    """
    then = parse_datetime(date_str)
    if then is None:
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    return int((now - then).total_seconds() // SECONDS_PER_DAY)
