"""Account head registry domain service."""

import logging
from decimal import Decimal
from typing import Optional

from societybooks.database.base import Database
from societybooks.domain.entities import (
    AccountHead,
    AccountHeadListing,
    DEFAULT_HEAD_CATEGORY,
    HEAD_CATEGORIES,
)
from societybooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_head_not_found,
    duplicate_account_head,
    society_not_found,
)
from societybooks.domain.validation import normalize_entry_type

logger = logging.getLogger(__name__)


class AccountHeadService:
    """Service for managing account heads.

    The registry is the only place heads are created; the cash book expects
    callers to resolve a head here first.
    """

    def __init__(self, db: Database):
        """Initialize account head service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_society(self, society_id: int) -> None:
        if self.db.get_society(society_id) is None:
            raise NotFoundError(society_not_found(society_id))

    def list_heads(self, society_id: int) -> AccountHeadListing:
        """List a society's account heads split into debit and credit names.

        Raises:
            NotFoundError: If the society does not exist
        """
        self._require_society(society_id)
        heads = self.db.list_account_heads(society_id)
        return AccountHeadListing(
            debit=tuple(h.name for h in heads if h.head_type.lower() == "debit"),
            credit=tuple(h.name for h in heads if h.head_type.lower() == "credit"),
            heads=tuple(heads),
        )

    def add_head(
        self,
        society_id: int,
        head_type: str,
        name: str,
        category: Optional[str] = None,
        opening_amount: Optional[Decimal] = None,
    ) -> AccountHead:
        """Create an account head.

        Names are compared exactly: "Rent" and "rent " are different heads.

        Raises:
            ValidationError: If type or name is missing, or the category is unknown
            NotFoundError: If the society does not exist
            ConflictError: If the society already has a head with this type and name
        """
        if not head_type or not name or not name.strip():
            raise ValidationError("Type and Name are required")
        normalized_type = normalize_entry_type(head_type)
        category = category or DEFAULT_HEAD_CATEGORY
        if category not in HEAD_CATEGORIES:
            raise ValidationError(
                f"Invalid category '{category}', expected one of: {', '.join(HEAD_CATEGORIES)}"
            )
        self._require_society(society_id)

        if self.db.find_account_head(society_id, name, head_type=normalized_type) is not None:
            raise ConflictError(duplicate_account_head())

        head_id = self.db.create_account_head(
            society_id=society_id,
            head_type=normalized_type,
            name=name,
            category=category,
            opening_amount=opening_amount if opening_amount is not None else Decimal("0"),
        )
        logger.info("Created account head %s '%s' for society %s", head_id, name, society_id)
        return self.db.get_account_head(head_id)

    def resolve_head(self, society_id: int, name: str, entry_type: str) -> AccountHead:
        """Return the society's head with this name, creating it if missing.

        A new head takes the type of the entry it is being resolved for and
        the default CashBook category.

        Raises:
            ValidationError: If name or entry type is invalid
            NotFoundError: If the society does not exist
        """
        if not name or not name.strip():
            raise ValidationError("Account head name is required")
        normalized_type = normalize_entry_type(entry_type)
        self._require_society(society_id)

        head = self.db.find_account_head(society_id, name)
        if head is not None:
            return head

        head_id = self.db.create_account_head(
            society_id=society_id,
            head_type=normalized_type,
            name=name,
            category=DEFAULT_HEAD_CATEGORY,
        )
        logger.info("Created account head %s '%s' for society %s on first use", head_id, name, society_id)
        return self.db.get_account_head(head_id)

    def get_head(self, account_head_id: int) -> Optional[AccountHead]:
        return self.db.get_account_head(account_head_id)

    def require_head(self, society_id: int, account_head_id: int) -> AccountHead:
        """Get a head of the given society or raise NotFoundError."""
        head = self.db.get_account_head(account_head_id)
        if head is None or head.society_id != society_id:
            raise NotFoundError(account_head_not_found(account_head_id))
        return head
