"""
Timing utilities.

Date/time formatting used by the attendance log and session summaries.
"""

from datetime import datetime
from typing import Tuple

DATE_FORMAT = '%d-%m-%Y'
TIME_FORMAT = '%H:%M:%S'


def format_timestamp(timestamp: datetime) -> Tuple[str, str]:
    """
    Split a timestamp into attendance date and time strings.

    Args:
        timestamp: Local time of the event

    Returns:
        Tuple of ('DD-MM-YYYY', 'HH:MM:SS')
    """
    return timestamp.strftime(DATE_FORMAT), timestamp.strftime(TIME_FORMAT)


def format_duration(seconds: float) -> str:
    """
    Format a duration in human-readable form.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., "1h 2m 5s")
    """
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)

    parts = []
    if hours:
        parts.append(f'{hours}h')
    if minutes:
        parts.append(f'{minutes}m')
    parts.append(f'{secs}s')

    return ' '.join(parts)
