"""
Schedule calculator.

Turns a free-text application frequency ("Apply every 7 days", "10 days",
"Seasonal") into a concrete next-application date. Parsing is lenient: the
first run of digits is the day count, and anything without digits falls back
to a weekly cadence.
"""
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

DEFAULT_FREQUENCY_DAYS = 7

_DIGITS = re.compile(r"\d+")


def parse_frequency_days(descriptor: Optional[str], default: int = DEFAULT_FREQUENCY_DAYS) -> int:
    """Return the first integer found in the descriptor, or ``default``."""
    match = _DIGITS.search(descriptor or "")
    if match is None:
        return default
    return int(match.group(0))


def add_days(start_date: Union[date, datetime], days: int) -> date:
    """Calendar-day addition; datetimes are truncated to their date first."""
    if isinstance(start_date, datetime):
        start_date = start_date.date()
    try:
        return start_date + timedelta(days=days)
    except OverflowError:
        return date.max


def compute_next_application(start_date: Union[date, datetime], frequency_descriptor: Optional[str]) -> date:
    """
    Compute the next application date for a treatment.

    Args:
        start_date: First application day
        frequency_descriptor: Free text such as "Apply every 10 days"

    Returns:
        start_date + parsed day count (7 when the text carries no number)
    """
    return add_days(start_date, parse_frequency_days(frequency_descriptor))
