"""Time and date utilities for dive logs and API values.

This module provides low-level helpers for:
- Converting clock times to minutes
- Calculating dive durations (with midnight wrap)
- Parsing the date and time strings the API returns

These utilities are timezone-agnostic and work with dt.date and dt.time.
"""

import datetime as dt
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60


def convert_time_to_minutes(time: dt.time) -> int:
    """Convert a dt.time object to minutes since midnight.

    Args:
        time: The time to convert

    Returns:
        Number of minutes since midnight (0-1439)

    Example:
        >>> convert_time_to_minutes(dt.time(9, 30))
        570
        >>> convert_time_to_minutes(dt.time(23, 59))
        1439
    """
    return time.hour * 60 + time.minute


def dive_duration_minutes(entry_time: dt.time, exit_time: dt.time) -> int:
    """Calculate bottom time in minutes between entry and exit.

    An exit earlier than the entry is taken to be on the next day.

    Args:
        entry_time: Time the diver entered the water
        exit_time: Time the diver left the water

    Returns:
        Duration in minutes

    Raises:
        ValueError: If entry and exit are the same time

    Example:
        >>> dive_duration_minutes(dt.time(9, 0), dt.time(9, 45))
        45
        >>> dive_duration_minutes(dt.time(23, 40), dt.time(0, 20))
        40
    """
    entry_minutes = convert_time_to_minutes(entry_time)
    exit_minutes = convert_time_to_minutes(exit_time)

    if exit_minutes == entry_minutes:
        raise ValueError("Exit time must be after entry time")

    if exit_minutes < entry_minutes:
        exit_minutes += MINUTES_PER_DAY

    return exit_minutes - entry_minutes


def parse_time(value: Union[str, dt.time]) -> dt.time:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into a dt.time.

    Raises:
        ValueError: If the value is not a valid clock time
    """
    if isinstance(value, dt.time):
        return value

    text = value.strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return dt.datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time format: {value}. Expected HH:MM")


def parse_api_date(value: Optional[Union[str, dt.date]]) -> Optional[dt.date]:
    """Parse a date returned by the API.

    The API sends plain ``YYYY-MM-DD`` dates for some fields and full ISO
    timestamps (``2024-03-01T00:00:00.000000Z``) for others; only the
    calendar date is kept.

    Returns:
        The date, or None for empty or unparseable values
    """
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(value[:10])
    except ValueError:
        return None


def format_api_date(value: Optional[Union[str, dt.date]], default: str = "-") -> str:
    """Render an API date as ``YYYY-MM-DD`` for display."""
    parsed = parse_api_date(value)
    return parsed.isoformat() if parsed else default
