"""Input normalisation shared by the domain services.

Every function raises ValidationError before any storage access happens.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from societybooks.domain.entities import EntryType, ReportType, Side
from societybooks.domain.errors import ValidationError, invalid_identifier


def require_identifier(value: Union[int, str, None], kind: str = "identifier") -> int:
    """Return a positive integer id, accepting its decimal string form."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(invalid_identifier(kind, value))
    if isinstance(value, int):
        if value <= 0:
            raise ValidationError(invalid_identifier(kind, value))
        return value
    text = str(value).strip()
    if not text.isdigit() or int(text) <= 0:
        raise ValidationError(invalid_identifier(kind, value))
    return int(text)


def normalize_entry_type(value: Union[str, EntryType, None]) -> str:
    """Map any casing of debit/credit onto the stored 'Debit'/'Credit'."""
    text = str(value.value if isinstance(value, EntryType) else value or "").strip().lower()
    if text == "debit":
        return EntryType.DEBIT.value
    if text == "credit":
        return EntryType.CREDIT.value
    raise ValidationError("Type must be either 'debit' or 'credit'")


def normalize_side(value: Union[str, Side, None]) -> Side:
    if isinstance(value, Side):
        return value
    try:
        return Side(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Invalid side, expected 'debit' or 'credit'")


def normalize_report_type(value: Union[str, ReportType, None]) -> ReportType:
    if isinstance(value, ReportType):
        return value
    try:
        return ReportType(str(value or "").strip())
    except ValueError:
        choices = ", ".join(t.value for t in ReportType)
        raise ValidationError(f"Invalid report type '{value}', expected one of: {choices}")


def require_positive_amount(value: Union[Decimal, int, str, None]) -> Decimal:
    """Return the amount as a Decimal, rejecting zero, negatives and junk."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a positive number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    return amount
