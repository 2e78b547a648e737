"""Financial year keys ("2024-25") running 1 July to 30 June."""

import re
from datetime import date

from household_tax.errors import InvalidRecordData

_YEAR_KEY = re.compile(r"^(\d{4})-(\d{2})$")

# Financial years start in July
_FIRST_MONTH = 7


def format_financial_year(start_year: int) -> str:
    """Build the key for the financial year starting 1 July of ``start_year``."""
    return f"{start_year}-{(start_year + 1) % 100:02d}"


def parse_financial_year(key: str) -> int:
    """Return the calendar year a financial year key starts in.

    Raises:
        InvalidRecordData: if the key is not ``YYYY-YY`` or the two halves
            are not consecutive years.
    """
    match = _YEAR_KEY.match(key) if isinstance(key, str) else None
    if match is None:
        raise InvalidRecordData(f"Malformed financial year: {key!r}. Expected 'YYYY-YY'.")

    start_year = int(match.group(1))
    if (start_year + 1) % 100 != int(match.group(2)):
        raise InvalidRecordData(f"Malformed financial year: {key!r}. Years must be consecutive.")
    return start_year


def financial_year_for(day: date) -> str:
    """Financial year containing ``day``."""
    start_year = day.year if day.month >= _FIRST_MONTH else day.year - 1
    return format_financial_year(start_year)


def current_financial_year(today: date | None = None) -> str:
    """Financial year for today. Only boundary code should call this without ``today``."""
    return financial_year_for(today or date.today())


def shift_financial_year(key: str, years: int) -> str:
    """Move a financial year key forwards (or backwards for negative ``years``)."""
    return format_financial_year(parse_financial_year(key) + years)


def prior_financial_years(key: str, count: int) -> list[str]:
    """The ``count`` financial years before ``key``, most recent first."""
    start_year = parse_financial_year(key)
    return [format_financial_year(start_year - offset) for offset in range(1, count + 1)]


def year_end(key: str) -> date:
    """30 June closing the financial year."""
    return date(parse_financial_year(key) + 1, 6, 30)


def days_until_year_end(today: date) -> int:
    """Days from ``today`` until the end of its financial year (0 on 30 June)."""
    return (year_end(financial_year_for(today)) - today).days
