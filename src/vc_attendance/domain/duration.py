"""Duration helpers for attendance sessions."""

import math
from datetime import datetime


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Return the whole seconds between two timestamps.

    The result is floored and signed: an ``end`` earlier than ``start`` yields a
    negative value, which callers treat as an anomaly.
    """
    return math.floor((end - start).total_seconds())


def format_duration(seconds: int) -> str:
    """Format seconds as ``HH:MM:SS``.

    Hours are not capped at two digits, so 100 hours renders as ``100:00:00``.
    """
    sign = "-" if seconds < 0 else ""
    seconds = abs(int(seconds))
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"
