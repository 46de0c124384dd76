"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Iterable
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from societybooks.domain.entities import (
    Society,
    AccountHead,
    CashBookEntry,
    ReportMapping,
)


class Database(ABC):
    """Abstract database interface for societybooks.

    Implementations raise ``StorageError`` when the backend fails.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Society operations
    @abstractmethod
    def create_society(
        self,
        name: str,
        society_type: str,
        financial_year_start: Optional[date],
        financial_year_end: Optional[date],
        initial_balance: Decimal = Decimal("0"),
        secretary_name: str = "",
        taluka: str = "",
        district: str = "",
        address: str = "",
    ) -> int:
        """Create a society. Returns society ID."""
        pass

    @abstractmethod
    def get_society(self, society_id: int) -> Optional[Society]:
        """Get society by ID."""
        pass

    @abstractmethod
    def list_societies(self) -> list[Society]:
        """List all societies, newest first."""
        pass

    @abstractmethod
    def update_society(self, society_id: int, **fields) -> None:
        """Update the given society columns."""
        pass

    # Account head operations
    @abstractmethod
    def create_account_head(
        self,
        society_id: int,
        head_type: str,
        name: str,
        category: str = "CashBook",
        opening_amount: Decimal = Decimal("0"),
    ) -> int:
        """Create an account head. Returns account head ID."""
        pass

    @abstractmethod
    def get_account_head(self, account_head_id: int) -> Optional[AccountHead]:
        """Get account head by ID."""
        pass

    @abstractmethod
    def find_account_head(
        self, society_id: int, name: str, head_type: Optional[str] = None
    ) -> Optional[AccountHead]:
        """Find a society's account head by exact name (and type, if given)."""
        pass

    @abstractmethod
    def list_account_heads(self, society_id: int) -> list[AccountHead]:
        """List a society's account heads in creation order."""
        pass

    @abstractmethod
    def get_account_heads(self, account_head_ids: Iterable[int]) -> dict[int, AccountHead]:
        """Get several account heads in one lookup, keyed by ID."""
        pass

    # Cash book operations
    @abstractmethod
    def create_entry(
        self,
        society_id: int,
        date: date,
        entry_type: str,
        account_head_id: int,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Create a cash book entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[CashBookEntry]:
        """Get cash book entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        society_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_head_id: Optional[int] = None,
    ) -> list[CashBookEntry]:
        """List a society's entries by ascending date within an inclusive range."""
        pass

    @abstractmethod
    def get_earliest_entry_date(self, society_id: int) -> Optional[date]:
        """Get the date of the society's oldest entry."""
        pass

    @abstractmethod
    def list_entry_dates(self, society_id: int) -> list[date]:
        """List the distinct dates a society has entries on."""
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        date: Optional[date] = None,
        entry_type: Optional[str] = None,
        account_head_id: Optional[int] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update the provided fields of an entry."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> bool:
        """Delete an entry. Returns False if it did not exist."""
        pass

    @abstractmethod
    def delete_entries(self, entry_ids: Iterable[int]) -> int:
        """Delete several entries. Returns the number deleted."""
        pass

    # Report mapping operations
    @abstractmethod
    def upsert_report_mappings(
        self, society_id: int, year: int, records: Iterable[tuple[int, str, str, Decimal]]
    ) -> None:
        """Insert or overwrite (account_head_id, side, report_type, total_amount) records."""
        pass

    @abstractmethod
    def get_report_mapping(
        self, society_id: int, year: int, account_head_id: int, side: str
    ) -> Optional[ReportMapping]:
        """Get the mapping of one (account head, side) row."""
        pass

    @abstractmethod
    def delete_report_mapping(
        self, society_id: int, year: int, account_head_id: int, side: str
    ) -> bool:
        """Delete one mapping. Returns False if there was none."""
        pass

    @abstractmethod
    def list_report_mappings(
        self,
        society_id: int,
        year: Optional[int] = None,
        report_type: Optional[str] = None,
    ) -> list[ReportMapping]:
        """List mappings ordered by year, account head and side."""
        pass
