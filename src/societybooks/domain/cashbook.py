"""Cash book (transaction ledger) domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from societybooks.database.base import Database
from societybooks.domain.entities import CashBookEntry, Society
from societybooks.domain.errors import (
    NotFoundError,
    ValidationError,
    account_head_not_found,
    entry_not_found,
    society_not_found,
)
from societybooks.domain.validation import (
    normalize_entry_type,
    require_identifier,
    require_positive_amount,
)

logger = logging.getLogger(__name__)


class CashBookService:
    """Service for recording and editing cash book entries.

    Entries always reference an existing head of their own society. Heads are
    never created here; resolve them through AccountHeadService first.
    """

    def __init__(self, db: Database):
        """Initialize cash book service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_society(self, society_id: int) -> Society:
        society = self.db.get_society(society_id)
        if society is None:
            raise NotFoundError(society_not_found(society_id))
        return society

    def _require_head_in_society(self, society_id: int, account_head_id: int) -> None:
        head = self.db.get_account_head(account_head_id)
        if head is None or head.society_id != society_id:
            raise NotFoundError(account_head_not_found(account_head_id))

    def validate_entry(
        self,
        society_id: int,
        date: Optional[date],
        entry_type: str,
        amount: Decimal,
    ) -> tuple[str, Decimal]:
        """Check the fields of a new entry without touching storage state.

        Call this before resolving the account head so a rejected entry
        leaves no new head behind.

        Returns:
            (normalized entry type, amount as Decimal)

        Raises:
            ValidationError: If type, amount or date is invalid, or the date
                precedes the society's first financial year
            NotFoundError: If the society does not exist
        """
        if date is None:
            raise ValidationError("Entry date is required")
        normalized_type = normalize_entry_type(entry_type)
        amount = require_positive_amount(amount)

        society = self._require_society(society_id)
        if society.financial_year_start is not None and date < society.financial_year_start:
            raise ValidationError(
                f"Entry date cannot be before financial year start ({society.financial_year_start})"
            )
        return normalized_type, amount

    def validate_update(
        self,
        entry_id: int,
        entry_type: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> CashBookEntry:
        """Check update values and return the current entry.

        Raises:
            ValidationError: If a provided value is invalid
            NotFoundError: If the entry does not exist
        """
        if entry_type is not None:
            normalize_entry_type(entry_type)
        if amount is not None:
            require_positive_amount(amount)
        return self.require_entry(entry_id)

    def add_entry(
        self,
        society_id: int,
        date: date,
        entry_type: str,
        account_head_id: int,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> CashBookEntry:
        """Record a cash book entry.

        Args:
            society_id: Society ID
            date: Entry date
            entry_type: 'debit' or 'credit' in any casing
            account_head_id: ID of an existing head of the same society
            amount: Positive amount
            description: Optional narration

        Returns:
            The stored entry

        Raises:
            ValidationError: If type, amount or date is invalid, or the date
                precedes the society's first financial year
            NotFoundError: If the society or account head does not exist
        """
        account_head_id = require_identifier(account_head_id, "account head id")
        normalized_type, amount = self.validate_entry(society_id, date, entry_type, amount)
        self._require_head_in_society(society_id, account_head_id)

        entry_id = self.db.create_entry(
            society_id=society_id,
            date=date,
            entry_type=normalized_type,
            account_head_id=account_head_id,
            amount=amount,
            description=description,
        )
        logger.info(
            "Recorded %s entry %s of %s on %s for society %s",
            normalized_type, entry_id, amount, date, society_id,
        )
        return self.db.get_entry(entry_id)

    def list_entries(self, society_id: int) -> list[CashBookEntry]:
        """List all of a society's entries, oldest first, with head names.

        Raises:
            NotFoundError: If the society does not exist
        """
        self._require_society(society_id)
        return self.db.list_entries(society_id)

    def get_entry(self, entry_id: int) -> Optional[CashBookEntry]:
        return self.db.get_entry(entry_id)

    def require_entry(self, entry_id: int) -> CashBookEntry:
        """Get an entry or raise NotFoundError."""
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def update_entry(
        self,
        entry_id: int,
        date: Optional[date] = None,
        entry_type: Optional[str] = None,
        account_head_id: Optional[int] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
    ) -> CashBookEntry:
        """Update any subset of an entry's fields.

        Raises:
            NotFoundError: If the entry, or the new account head, does not exist
            ValidationError: If a provided value is invalid
        """
        normalized_type = normalize_entry_type(entry_type) if entry_type is not None else None
        if amount is not None:
            amount = require_positive_amount(amount)
        if account_head_id is not None:
            account_head_id = require_identifier(account_head_id, "account head id")

        entry = self.require_entry(entry_id)
        if account_head_id is not None:
            self._require_head_in_society(entry.society_id, account_head_id)

        self.db.update_entry(
            entry_id=entry_id,
            date=date,
            entry_type=normalized_type,
            account_head_id=account_head_id,
            amount=amount,
            description=description,
        )
        logger.info("Updated entry %s", entry_id)
        return self.db.get_entry(entry_id)

    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        if not self.db.delete_entry(entry_id):
            raise NotFoundError(entry_not_found(entry_id))
        logger.info("Deleted entry %s", entry_id)

    def delete_entries(self, entry_ids: Iterable) -> int:
        """Delete several entries at once.

        Every ID is validated before anything is deleted.

        Returns:
            Number of entries deleted

        Raises:
            ValidationError: If the list is empty or any ID is malformed
            NotFoundError: If none of the entries exist
        """
        raw_ids = list(entry_ids or [])
        if not raw_ids:
            raise ValidationError("Please provide a list of entry IDs")
        try:
            ids = [require_identifier(value, "entry id") for value in raw_ids]
        except ValidationError:
            raise ValidationError("Some IDs are invalid")

        deleted = self.db.delete_entries(ids)
        if deleted == 0:
            raise NotFoundError("No entries found to delete")
        logger.info("Deleted %d entries", deleted)
        return deleted
