"""Date and time formatting utilities."""

from datetime import timedelta
from typing import Optional


def format_age(age: Optional[timedelta]) -> str:
    """
    Format an inactivity duration in its largest whole unit.

    Args:
        age: Duration, or None if unknown

    Returns:
        Formatted age string, e.g. "3d", "5h", "12m" or "unknown"
    """
    if age is None:
        return "unknown"
    seconds = int(age.total_seconds())
    if seconds >= 86400:
        return f"{seconds // 86400}d"
    if seconds >= 3600:
        return f"{seconds // 3600}h"
    return f"{max(seconds // 60, 0)}m"
