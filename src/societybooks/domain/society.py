"""Society domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from societybooks.database.base import Database
from societybooks.domain.entities import Society, SocietyType
from societybooks.domain.errors import NotFoundError, ValidationError, society_not_found

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "secretary_name",
    "taluka",
    "district",
    "address",
    "society_type",
    "initial_balance",
    "financial_year_start",
    "financial_year_end",
)


def _normalize_society_type(society_type: str) -> str:
    value = (society_type or "").strip().lower()
    if value not in {t.value for t in SocietyType}:
        raise ValidationError("Society type must be either 'housing' or 'labour'")
    return value


def _check_year_bounds(start: Optional[date], end: Optional[date]) -> None:
    if start is not None and end is not None and start >= end:
        raise ValidationError("Financial year start must be before financial year end")


class SocietyService:
    """Service for managing societies."""

    def __init__(self, db: Database):
        """Initialize society service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_society(
        self,
        name: str,
        society_type: str,
        financial_year_start: date,
        financial_year_end: date,
        initial_balance: Decimal = Decimal("0"),
        secretary_name: str = "",
        taluka: str = "",
        district: str = "",
        address: str = "",
    ) -> int:
        """Create a society.

        Args:
            name: Society name
            society_type: 'housing' or 'labour'
            financial_year_start: First day of the society's first financial year
            financial_year_end: Last day of the society's first financial year
            initial_balance: Cash balance at inception

        Returns:
            Society ID

        Raises:
            ValidationError: If a required field is missing or the year bounds are inverted
        """
        if not name or not name.strip():
            raise ValidationError("Society name is required")
        if financial_year_start is None or financial_year_end is None:
            raise ValidationError("Financial year start and end are required")
        _check_year_bounds(financial_year_start, financial_year_end)

        society_id = self.db.create_society(
            name=name.strip(),
            society_type=_normalize_society_type(society_type),
            financial_year_start=financial_year_start,
            financial_year_end=financial_year_end,
            initial_balance=initial_balance if initial_balance is not None else Decimal("0"),
            secretary_name=secretary_name or "",
            taluka=taluka or "",
            district=district or "",
            address=address or "",
        )
        logger.info("Created society %s (%s)", society_id, name)
        return society_id

    def get_society(self, society_id: int) -> Optional[Society]:
        return self.db.get_society(society_id)

    def require_society(self, society_id: int) -> Society:
        """Get a society or raise NotFoundError."""
        society = self.db.get_society(society_id)
        if society is None:
            raise NotFoundError(society_not_found(society_id))
        return society

    def list_societies(self) -> list[Society]:
        return self.db.list_societies()

    def update_society(self, society_id: int, **changes) -> Society:
        """Update the editable fields of a society.

        Fields passed as None are left unchanged.

        Raises:
            NotFoundError: If the society does not exist
            ValidationError: If a field is not editable or values are invalid
        """
        society = self.require_society(society_id)

        updates = {}
        for key, value in changes.items():
            if key not in EDITABLE_FIELDS:
                raise ValidationError(f"Field '{key}' cannot be updated")
            if value is not None:
                updates[key] = value

        if "society_type" in updates:
            updates["society_type"] = _normalize_society_type(updates["society_type"])
        _check_year_bounds(
            updates.get("financial_year_start", society.financial_year_start),
            updates.get("financial_year_end", society.financial_year_end),
        )

        if updates:
            self.db.update_society(society_id, **updates)
            logger.info("Updated society %s: %s", society_id, ", ".join(sorted(updates)))
        return self.require_society(society_id)
