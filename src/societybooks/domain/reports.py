"""Report derivation domain service.

Profit & Loss and Construction lines are the amounts snapshotted when a row
was mapped; every year stands alone. Balance Sheet lines are balances: they
are recomputed from the live cash book and each head carries its amount
forward into its next mapped year.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Optional, Sequence

from societybooks.database.base import Database
from societybooks.domain.balance import BalanceService
from societybooks.domain.entities import (
    ZERO,
    HeadTotals,
    ReportLine,
    ReportMapping,
    ReportSummary,
    ReportType,
    Side,
)
from societybooks.domain.errors import NotFoundError, society_not_found

logger = logging.getLogger(__name__)


class ReportService:
    """Service deriving reports from report mappings."""

    def __init__(self, db: Database, balance_service: Optional[BalanceService] = None):
        """Initialize report service.

        Args:
            db: Database instance
            balance_service: Balance engine used for live yearly totals
        """
        self.db = db
        self.balance_service = balance_service or BalanceService(db)

    def _require_society(self, society_id: int) -> None:
        if self.db.get_society(society_id) is None:
            raise NotFoundError(society_not_found(society_id))

    def _head_names(self, mappings: Sequence[ReportMapping]) -> dict[int, str]:
        heads = self.db.get_account_heads({m.account_head_id for m in mappings})
        return {head_id: head.name for head_id, head in heads.items()}

    def _snapshot_report(self, society_id: int, report_type: ReportType) -> list[ReportLine]:
        self._require_society(society_id)
        mappings = self.db.list_report_mappings(society_id, report_type=report_type.value)
        names = self._head_names(mappings)
        return [
            ReportLine(
                account_head_id=m.account_head_id,
                account_head_name=names.get(m.account_head_id, ""),
                amount=m.total_amount,
                side=m.side,
                year=m.year,
            )
            for m in mappings
        ]

    def profit_loss(self, society_id: int) -> list[ReportLine]:
        """List every Profit & Loss line of the society across all years.

        Raises:
            NotFoundError: If the society does not exist
        """
        return self._snapshot_report(society_id, ReportType.PROFIT_LOSS)

    def construction_statement(self, society_id: int) -> list[ReportLine]:
        """List every Construction statement line of the society across all years."""
        return self._snapshot_report(society_id, ReportType.CONSTRUCTION)

    def balance_sheet(self, society_id: int) -> list[ReportLine]:
        """List every Balance Sheet line with carry-forward applied.

        For each mapped year in ascending order, a head's amount is its
        matching-side total minus its opposite-side total for that year, plus
        the amount computed for the same head in its previous mapped year.

        Raises:
            NotFoundError: If the society does not exist
        """
        self._require_society(society_id)
        mappings = self.db.list_report_mappings(
            society_id, report_type=ReportType.BALANCE_SHEET.value
        )
        if not mappings:
            return []

        by_year: dict[int, dict[int, Side]] = defaultdict(dict)
        for m in mappings:
            by_year[m.year][m.account_head_id] = Side(m.side)
        names = self._head_names(mappings)

        carry_forward: dict[int, Decimal] = {}
        lines: list[ReportLine] = []
        for year in sorted(by_year):
            totals = self.balance_service.year_totals(society_id, year)
            for account_head_id, side in sorted(by_year[year].items()):
                head_totals = totals.get(account_head_id, HeadTotals())
                amount = (
                    head_totals.side_total(side)
                    + carry_forward.get(account_head_id, ZERO)
                    - head_totals.side_total(side.opposite)
                )
                carry_forward[account_head_id] = amount
                lines.append(
                    ReportLine(
                        account_head_id=account_head_id,
                        account_head_name=names.get(account_head_id, ""),
                        amount=amount,
                        side=side.value,
                        year=year,
                    )
                )
        logger.debug("Balance sheet for society %s: %d lines over %d years", society_id, len(lines), len(by_year))
        return lines

    def summarize(
        self, lines: Sequence[ReportLine], year: int, skip_zero: bool = False
    ) -> ReportSummary:
        """Lay out one year of report lines as a balanced two-column statement.

        Debit-side lines form the first column and credit-side lines the
        second. The difference is the net result; it is added to the smaller
        column so both column totals agree.
        """
        selected = [
            line for line in lines
            if line.year == year and not (skip_zero and line.amount == 0)
        ]
        debit_lines = tuple(line for line in selected if line.side == Side.DEBIT.value)
        credit_lines = tuple(line for line in selected if line.side == Side.CREDIT.value)

        total_debit = sum((line.amount for line in debit_lines), ZERO)
        total_credit = sum((line.amount for line in credit_lines), ZERO)
        net_result = total_debit - total_credit
        is_profit = net_result > 0
        balancing_amount = abs(net_result)

        return ReportSummary(
            year=year,
            debit_lines=debit_lines,
            credit_lines=credit_lines,
            total_debit=total_debit,
            total_credit=total_credit,
            net_result=net_result,
            is_profit=is_profit,
            balancing_amount=balancing_amount,
            debit_total_with_balance=total_debit if is_profit else total_debit + balancing_amount,
            credit_total_with_balance=total_credit + balancing_amount if is_profit else total_credit,
        )
