"""Formatting utilities for workbloom.

- date: Age formatting
- status: Merge status, rejection and skip formatting
"""

from .date import format_age
from .status import (
    format_merge_status,
    format_activity_notes,
    format_rejection,
    format_skip,
    get_activity_style_type,
)

__all__ = [
    "format_age",
    "format_merge_status",
    "format_activity_notes",
    "format_rejection",
    "format_skip",
    "get_activity_style_type",
]
