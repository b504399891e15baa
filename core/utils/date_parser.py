"""Date parsing utilities for the matchweek results bot.

Centralizes all date parsing and formatting so that every instant in the
system is a UTC pendulum datetime and every instant leaving it uses the
same ISO-8601 form.
"""

import logging
from datetime import datetime

import pendulum

from config.constants import TIMEZONE

logger = logging.getLogger(__name__)


def parse_iso_datetime(
    datetime_str: str, timezone: str = TIMEZONE
) -> pendulum.DateTime:
    """Parse ISO 8601 datetime into pendulum datetime.

    Used for upstream kickoff instants ("utcDate").

    Args:
        datetime_str: ISO 8601 string (e.g., "2024-03-09T15:00:00Z")
        timezone: Target timezone (default: UTC)

    Returns:
        Timezone-aware pendulum datetime in specified timezone

    Raises:
        ValueError: If datetime_str is invalid or has no offset
    """
    try:
        clean_str = datetime_str.replace("Z", "+00:00")
        dt = datetime.fromisoformat(clean_str)
    except (ValueError, AttributeError, TypeError) as e:
        logger.error(f"ISO parse error: '{datetime_str}': {e}")
        raise ValueError(f"Invalid ISO datetime: '{datetime_str}'") from e

    if dt.tzinfo is None:
        raise ValueError(f"ISO datetime has no offset: '{datetime_str}'")

    return pendulum.instance(dt).in_timezone(timezone)


def format_iso_utc(dt: datetime) -> str:
    """Format a datetime as a UTC ISO-8601 string with milliseconds.

    Args:
        dt: Timezone-aware datetime

    Returns:
        String like "2024-03-08T00:00:00.000Z"
    """
    return pendulum.instance(dt).in_timezone("UTC").format(
        "YYYY-MM-DDTHH:mm:ss.SSS[Z]"
    )


def format_to_yyyy_mm_dd(dt: datetime) -> str:
    """Format a datetime to the UTC calendar day it falls on.

    Args:
        dt: Timezone-aware datetime

    Returns:
        Date string in YYYY-MM-DD format
    """
    return pendulum.instance(dt).in_timezone("UTC").format("YYYY-MM-DD")
