"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(value: Union[str, date, datetime]) -> date:
    """Parse a ledger date cell into a date object.

    Ledger cells may already hold dates (spreadsheet exports, in-memory
    ledgers) or text such as "2024-01-15" or "January 15, 2024".

    Args:
        value: Date, datetime or date string

    Returns:
        Date object

    Raises:
        ValueError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        raise ValueError("Empty date string")

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{text}': {e}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Get the first and last day of a month, both inclusive.

    Args:
        year: Calendar year
        month: Month number (1-12)

    Returns:
        Tuple of (first_day, last_day)
    """
    start_date = date(year, month, 1)
    # Last day of the month is the day before the first of the next month
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
