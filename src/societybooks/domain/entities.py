"""Domain model entities for societybooks.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Services and the CLI only ever see these types.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class EntryType(str, Enum):
    """Column of the cash book an entry (or account head) belongs to."""

    DEBIT = "Debit"
    CREDIT = "Credit"


class Side(str, Enum):
    """Trial balance column a report mapping refers to."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "Side":
        return Side.CREDIT if self is Side.DEBIT else Side.DEBIT


class ReportType(str, Enum):
    """Target report of a mapped trial balance row."""

    PROFIT_LOSS = "profitLoss"
    BALANCE_SHEET = "balanceSheet"
    CONSTRUCTION = "construction"


class SocietyType(str, Enum):
    HOUSING = "housing"
    LABOUR = "labour"


HEAD_CATEGORIES = ("CashBook", "ProfitLoss", "Construction", "BalanceSheet")
DEFAULT_HEAD_CATEGORY = "CashBook"


@dataclass(frozen=True)
class Society:
    """Cooperative society whose books are kept."""

    id: int
    name: str
    secretary_name: str
    taluka: str
    district: str
    address: str
    society_type: str
    initial_balance: Decimal
    financial_year_start: Optional[date]
    financial_year_end: Optional[date]
    created_at: datetime

    @property
    def current_year(self) -> Optional[str]:
        """Label of the society's first financial year, e.g. '2024-2025'."""
        if self.financial_year_start is None or self.financial_year_end is None:
            return None
        return f"{self.financial_year_start.year}-{self.financial_year_end.year}"


@dataclass(frozen=True)
class AccountHead:
    """Named classification of money movement within a society."""

    id: int
    society_id: int
    head_type: str
    name: str
    category: str
    opening_amount: Decimal
    created_at: datetime


@dataclass(frozen=True)
class CashBookEntry:
    """A dated, single-sided cash book transaction."""

    id: int
    society_id: int
    date: date
    entry_type: str
    account_head_id: int
    amount: Decimal
    description: Optional[str]
    created_at: datetime
    account_head_name: Optional[str] = None

    @property
    def is_debit(self) -> bool:
        """Anything not spelled 'debit' aggregates as credit."""
        return str(self.entry_type).lower() == Side.DEBIT.value


@dataclass(frozen=True)
class ReportMapping:
    """Classification of one trial balance row for one financial year."""

    id: int
    society_id: int
    year: int
    account_head_id: int
    side: str
    report_type: str
    total_amount: Decimal
    updated_at: datetime

    @property
    def composite_key(self) -> str:
        return f"{self.account_head_id}:{self.side}"


@dataclass(frozen=True)
class HeadTotals:
    """Debit and credit totals of one account head within one year."""

    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def side_total(self, side: Side) -> Decimal:
        return self.debit if side is Side.DEBIT else self.credit


@dataclass(frozen=True)
class TrialBalanceRow:
    account_head_id: int
    account_head_name: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """Per-head totals of a financial year with its opening and closing balance."""

    society_id: int
    year: int
    rows: tuple[TrialBalanceRow, ...]
    total_debit: Decimal
    total_credit: Decimal
    opening_balance: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class YearBalance:
    """One step of the opening/closing balance chain."""

    year: int
    opening_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class AccountHeadListing:
    debit: tuple[str, ...]
    credit: tuple[str, ...]
    heads: tuple[AccountHead, ...]


@dataclass(frozen=True)
class ReportLine:
    """One line of a derived report."""

    account_head_id: int
    account_head_name: str
    amount: Decimal
    side: str
    year: int


@dataclass(frozen=True)
class ReportSummary:
    """Two-column statement of one report for one year.

    The balancing amount is added to whichever column is smaller so both
    column totals agree.
    """

    year: int
    debit_lines: tuple[ReportLine, ...]
    credit_lines: tuple[ReportLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    net_result: Decimal
    is_profit: bool
    balancing_amount: Decimal
    debit_total_with_balance: Decimal
    credit_total_with_balance: Decimal
