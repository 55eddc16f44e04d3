"""
ISO-8601 week based date codes (YYWW).
"""

from datetime import date


def iso_week_number(d: date) -> int:
    """
    ISO week number (1-53) of a date.

    Weeks start on Monday and week 1 is the week holding the year's
    first Thursday, so late December can fall in week 1 and early
    January in week 52/53.
    """
    return d.isocalendar()[1]


def date_code(d: date | None = None) -> str:
    """
    Build the YYWW date code for a date.

    The year is taken from the ISO week-year (the year of that week's
    Thursday), not the calendar year.

    Args:
        d: Date or datetime (defaults to today)

    Returns:
        4-character code, e.g. "2518" for ISO week 18 of 2025

    Example:
        >>> date_code(date(2024, 12, 31))
        '2501'
        >>> date_code(date(1999, 12, 31))
        '9952'
    """
    d = d or date.today()
    iso_year, week, _ = d.isocalendar()
    return f"{iso_year % 100:02d}{week:02d}"
