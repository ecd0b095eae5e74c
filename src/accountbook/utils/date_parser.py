"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 Jan 2024") and the relative
    forms used for closing dates:
    - "today", "yesterday", "tomorrow"
    - "start of month", "end of month", "end of last month"
    - "start of year", "end of last year"

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = " ".join(date_str.strip().lower().split())
    today = date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "start of month": month_start,
        "end of month": month_start + relativedelta(months=1) - timedelta(days=1),
        "end of last month": month_start - timedelta(days=1),
        "start of year": year_start,
        "end of last year": year_start - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        # Day-first matches the dd/mm/yyyy dates on local bank statements
        return date_parser.parse(date_str, dayfirst="/" in date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a reporting period.

    Args:
        period: this-month, this-quarter, this-year, last-month, last-quarter or last-year

    Returns:
        Tuple of (start_date, end_date). Current periods end today.

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    if period == "this-quarter":
        return (_quarter_start(today), today)

    if period == "this-year":
        return (today.replace(month=1, day=1), today)

    if period == "last-month":
        end_date = today.replace(day=1) - timedelta(days=1)
        return (end_date.replace(day=1), end_date)

    if period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return (_quarter_start(end_date), end_date)

    if period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start_date, start_date.replace(month=12, day=31))

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: this-month, this-quarter, "
        "this-year, last-month, last-quarter, last-year"
    )
