"""Financial year balance engine.

Turns a society's initial balance and its cash book into year-scoped
opening/closing balances and per-head debit/credit totals. The closing
balance of FY(y) is always the opening balance of FY(y + 1) because both come
from a single walk over consecutive years starting at the society's first
financial year.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterator, Optional, Sequence, Union

from societybooks.database.base import Database
from societybooks.domain.entities import (
    ZERO,
    CashBookEntry,
    HeadTotals,
    Society,
    TrialBalance,
    TrialBalanceRow,
    YearBalance,
)
from societybooks.domain.errors import NotFoundError, society_not_found
from societybooks.domain.financial_year import (
    financial_year_label,
    financial_year_of,
    financial_year_range,
    parse_financial_year,
)

logger = logging.getLogger(__name__)


def net_movement(entries: Sequence[CashBookEntry]) -> tuple[Decimal, Decimal]:
    """Return (total debit, total credit) of a set of entries."""
    debit = ZERO
    credit = ZERO
    for entry in entries:
        if entry.is_debit:
            debit += entry.amount
        else:
            credit += entry.amount
    return debit, credit


def group_by_head(entries: Sequence[CashBookEntry]) -> dict[int, HeadTotals]:
    """Aggregate entries into per-head totals, in order of first appearance."""
    sums: dict[int, list[Decimal]] = {}
    for entry in entries:
        pair = sums.setdefault(entry.account_head_id, [ZERO, ZERO])
        if entry.is_debit:
            pair[0] += entry.amount
        else:
            pair[1] += entry.amount
    return {head_id: HeadTotals(debit=d, credit=c) for head_id, (d, c) in sums.items()}


class BalanceService:
    """Service computing trial balances and the year-to-year balance chain."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_society(self, society_id: int) -> Society:
        society = self.db.get_society(society_id)
        if society is None:
            raise NotFoundError(society_not_found(society_id))
        return society

    def _first_year(self, society: Society) -> int:
        recorded = None
        if society.financial_year_start is not None:
            recorded = financial_year_of(society.financial_year_start)

        earliest = self.db.get_earliest_entry_date(society.id)
        if earliest is not None:
            earliest_year = financial_year_of(earliest)
            if recorded is None or earliest_year < recorded:
                return earliest_year

        if recorded is not None:
            return recorded
        return financial_year_of(society.created_at)

    def first_year(self, society_id: int) -> int:
        """Return the start year of the society's first financial year.

        An entry dated before the recorded financial year start moves the
        first year back; without a recorded start the creation date is used.

        Raises:
            NotFoundError: If the society does not exist
        """
        return self._first_year(self._require_society(society_id))

    def _walk(self, society: Society, last_year: int) -> Iterator[YearBalance]:
        first = self._first_year(society)
        if last_year < first:
            return

        start, _ = financial_year_range(first)
        _, end = financial_year_range(last_year)
        by_year: dict[int, list[CashBookEntry]] = defaultdict(list)
        for entry in self.db.list_entries(society.id, start_date=start, end_date=end):
            by_year[financial_year_of(entry.date)].append(entry)

        running = society.initial_balance
        for year in range(first, last_year + 1):
            debit, credit = net_movement(by_year.get(year, ()))
            closing = running + debit - credit
            yield YearBalance(
                year=year,
                opening_balance=running,
                total_debit=debit,
                total_credit=credit,
                closing_balance=closing,
            )
            running = closing

    def year_balances(self, society_id: int, last_year: Union[int, str]) -> list[YearBalance]:
        """Return the balance chain from the first financial year through last_year.

        Raises:
            ValidationError: If last_year is not a valid year
            NotFoundError: If the society does not exist
        """
        last_year = parse_financial_year(last_year)
        return list(self._walk(self._require_society(society_id), last_year))

    def _opening_balance(self, society: Society, year: int) -> Decimal:
        running = society.initial_balance
        for step in self._walk(society, year - 1):
            running = step.closing_balance
        return running

    def opening_balance(self, society_id: int, year: Union[int, str]) -> Decimal:
        """Return the opening balance of a financial year.

        The first financial year (and any year before it) opens at the
        society's initial balance.
        """
        year = parse_financial_year(year)
        return self._opening_balance(self._require_society(society_id), year)

    def _year_entries(self, society_id: int, year: int, account_head_id: Optional[int] = None):
        start, end = financial_year_range(year)
        return self.db.list_entries(
            society_id, start_date=start, end_date=end, account_head_id=account_head_id
        )

    def year_totals(self, society_id: int, year: Union[int, str]) -> dict[int, HeadTotals]:
        """Return per-head debit/credit totals of one financial year."""
        year = parse_financial_year(year)
        self._require_society(society_id)
        return group_by_head(self._year_entries(society_id, year))

    def head_totals(self, society_id: int, year: Union[int, str], account_head_id: int) -> HeadTotals:
        """Return the debit/credit totals of one head in one financial year."""
        year = parse_financial_year(year)
        self._require_society(society_id)
        entries = self._year_entries(society_id, year, account_head_id=account_head_id)
        return group_by_head(entries).get(account_head_id, HeadTotals())

    def trial_balance(self, society_id: int, year: Union[int, str]) -> TrialBalance:
        """Build the trial balance of one financial year.

        Rows cover every head with activity in the year, in order of first
        activity, followed by zero rows for heads that are mapped for the year
        but had no activity. Opening and closing balances are reported
        separately and never folded into the rows.

        Raises:
            ValidationError: If year is not a valid year
            NotFoundError: If the society does not exist
        """
        year = parse_financial_year(year)
        society = self._require_society(society_id)

        opening = self._opening_balance(society, year)
        entries = self._year_entries(society_id, year)
        totals = group_by_head(entries)
        names = {entry.account_head_id: entry.account_head_name or "" for entry in entries}

        rows = [
            TrialBalanceRow(
                account_head_id=head_id,
                account_head_name=names.get(head_id, ""),
                debit=head.debit,
                credit=head.credit,
            )
            for head_id, head in totals.items()
        ]

        mapped_ids = sorted(
            {m.account_head_id for m in self.db.list_report_mappings(society_id, year=year)}
            - set(totals)
        )
        if mapped_ids:
            heads = self.db.get_account_heads(mapped_ids)
            for head_id in mapped_ids:
                head = heads.get(head_id)
                rows.append(
                    TrialBalanceRow(
                        account_head_id=head_id,
                        account_head_name=head.name if head is not None else "",
                        debit=ZERO,
                        credit=ZERO,
                    )
                )

        total_debit = sum((row.debit for row in rows), ZERO)
        total_credit = sum((row.credit for row in rows), ZERO)
        closing = opening + total_debit - total_credit
        logger.debug(
            "Trial balance society=%s year=%s opening=%s debit=%s credit=%s closing=%s",
            society_id, year, opening, total_debit, total_credit, closing,
        )
        return TrialBalance(
            society_id=society_id,
            year=year,
            rows=tuple(rows),
            total_debit=total_debit,
            total_credit=total_credit,
            opening_balance=opening,
            closing_balance=closing,
        )

    def available_years(self, society_id: int) -> list[str]:
        """List financial year labels that have entries, most recent first.

        A society without entries reports the year of its recorded financial
        year start (or of its creation date).

        Raises:
            NotFoundError: If the society does not exist
        """
        society = self._require_society(society_id)
        years = {financial_year_of(d) for d in self.db.list_entry_dates(society_id)}
        if not years:
            anchor = society.financial_year_start or society.created_at
            years = {financial_year_of(anchor)}
        return [financial_year_label(y) for y in sorted(years, reverse=True)]
