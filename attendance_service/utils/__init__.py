"""
Utility modules package.
"""

from .timing import format_timestamp, format_duration, DATE_FORMAT, TIME_FORMAT

__all__ = [
    'format_timestamp',
    'format_duration',
    'DATE_FORMAT',
    'TIME_FORMAT',
]
