"""
Default date formatter for aggregate posts.

``"ordinal"`` (or no format) renders dates as ``Jan 3rd, 2024``. Any other
value is a strftime pattern in which ``%o`` stands for the ordinal day.
"""

from datetime import datetime
from typing import Callable, Optional

ORDINAL_FORMAT = "ordinal"

DateFormatter = Callable[[datetime, Optional[str]], str]


def ordinal(number: int) -> str:
    """1 -> '1st', 12 -> '12th', 22 -> '22nd'."""
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def format_date(timestamp: datetime, date_format: Optional[str] = None) -> str:
    """Format a timestamp for display.

    Args:
        timestamp: Date to format
        date_format: "ordinal", None, or a strftime pattern

    Returns:
        Formatted date string
    """
    day = ordinal(timestamp.day)
    if not date_format or date_format == ORDINAL_FORMAT:
        return f"{timestamp.strftime('%b')} {day}, {timestamp.year}"
    # %o is not a strftime directive, substitute it first
    return timestamp.strftime(date_format.replace("%o", day))
