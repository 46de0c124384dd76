"""April-March financial year grid.

Every financial year is labelled by the calendar year it starts in:
FY 2024 runs from 2024-04-01 to 2025-03-31 inclusive.
"""

from datetime import date, datetime
from typing import Union

from societybooks.domain.errors import ValidationError

FY_START_MONTH = 4
# the last day of a financial year falls in the following calendar year
MIN_YEAR = 1
MAX_YEAR = 9998


def financial_year_of(value: Union[date, datetime]) -> int:
    """Return the start year of the financial year containing a date."""
    return value.year if value.month >= FY_START_MONTH else value.year - 1


def financial_year_range(year: int) -> tuple[date, date]:
    """Return the inclusive (first day, last day) of a financial year."""
    return date(year, FY_START_MONTH, 1), date(year + 1, FY_START_MONTH - 1, 31)


def financial_year_label(year: int) -> str:
    """Return the display label of a financial year, e.g. '2024-2025'."""
    return f"{year}-{year + 1}"


def parse_financial_year(value: Union[int, str, None]) -> int:
    """Parse a financial year given as 2024, '2024', '2024-2025' or '2024-25'.

    Raises:
        ValidationError: If no integer start year can be read, or the year
            is outside MIN_YEAR..MAX_YEAR
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid year '{value}'")
    if isinstance(value, int):
        return _require_year_in_range(value, value)
    if value is None or not str(value).strip():
        raise ValidationError("Year required")

    head = str(value).strip().split("-")[0].strip()
    try:
        year = int(head)
    except ValueError:
        raise ValidationError(f"Invalid year '{value}'")
    return _require_year_in_range(year, value)


def _require_year_in_range(year: int, value) -> int:
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Invalid year '{value}'")
    return year
