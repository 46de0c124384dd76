"""Report mapping domain service.

A bookkeeper classifies each (account head, side) row of a year's trial
balance into one target report. The row's total is snapshotted when the
mapping is written. Within one year a head may sit on the balance sheet on
one side only.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from societybooks.database.base import Database
from societybooks.domain.balance import BalanceService
from societybooks.domain.entities import ReportMapping, ReportType, Side
from societybooks.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_head_not_found,
    balance_sheet_side_conflict,
    society_not_found,
)
from societybooks.domain.financial_year import parse_financial_year
from societybooks.domain.validation import (
    normalize_report_type,
    normalize_side,
    require_identifier,
)

logger = logging.getLogger(__name__)

COMPOSITE_KEY_PATTERN = re.compile(r"^([1-9]\d*):(debit|credit)$")


def composite_key(account_head_id: int, side: Union[Side, str]) -> str:
    """Return the '<accountHeadId>:<side>' key of a trial balance row."""
    side_value = side.value if isinstance(side, Side) else side
    return f"{account_head_id}:{side_value}"


def parse_composite_key(key: str) -> Optional[tuple[int, Side]]:
    """Split a composite key, returning None when it is malformed."""
    match = COMPOSITE_KEY_PATTERN.match(str(key))
    if match is None:
        return None
    return int(match.group(1)), Side(match.group(2))


class ReportMappingService:
    """Service for classifying trial balance rows into reports."""

    def __init__(self, db: Database, balance_service: Optional[BalanceService] = None):
        """Initialize report mapping service.

        Args:
            db: Database instance
            balance_service: Balance engine used to snapshot row totals
        """
        self.db = db
        self.balance_service = balance_service or BalanceService(db)

    def _require_society(self, society_id: int) -> None:
        if self.db.get_society(society_id) is None:
            raise NotFoundError(society_not_found(society_id))

    def _require_head(self, society_id: int, account_head_id: int) -> None:
        head = self.db.get_account_head(account_head_id)
        if head is None or head.society_id != society_id:
            raise NotFoundError(account_head_not_found(account_head_id))

    def _balance_sheet_rows(self, society_id: int, year: int) -> set[tuple[int, Side]]:
        return {
            (m.account_head_id, Side(m.side))
            for m in self.db.list_report_mappings(
                society_id, year=year, report_type=ReportType.BALANCE_SHEET.value
            )
        }

    def set_mapping(
        self,
        society_id: int,
        year: Union[int, str],
        account_head_id: Union[int, str],
        side: Union[Side, str],
        report_type: Union[ReportType, str],
    ) -> ReportMapping:
        """Map one trial balance row of a year to a report.

        The stored total is the head's debit or credit total for the year at
        the time of the call.

        Raises:
            ValidationError: If year, id, side or report type is invalid
            NotFoundError: If the society or account head does not exist
            ConflictError: If mapping to the balance sheet while the opposite
                side of the same head is already there
        """
        year = parse_financial_year(year)
        account_head_id = require_identifier(account_head_id, "accountHeadId")
        side = normalize_side(side)
        report_type = normalize_report_type(report_type)
        self._require_society(society_id)
        self._require_head(society_id, account_head_id)

        if report_type is ReportType.BALANCE_SHEET:
            if (account_head_id, side.opposite) in self._balance_sheet_rows(society_id, year):
                logger.warning(
                    "Rejected balance sheet mapping of head %s %s for %s: opposite side already mapped",
                    account_head_id, side.value, year,
                )
                raise ConflictError(balance_sheet_side_conflict(account_head_id, side.value))

        totals = self.balance_service.head_totals(society_id, year, account_head_id)
        total_amount = totals.side_total(side)
        self.db.upsert_report_mappings(
            society_id, year, [(account_head_id, side.value, report_type.value, total_amount)]
        )
        logger.info(
            "Mapped head %s %s to %s for %s (amount %s)",
            account_head_id, side.value, report_type.value, year, total_amount,
        )
        return self.db.get_report_mapping(society_id, year, account_head_id, side.value)

    def clear_mapping(
        self,
        society_id: int,
        year: Union[int, str],
        account_head_id: Union[int, str],
        side: Union[Side, str],
    ) -> bool:
        """Remove the mapping of one row. Succeeds whether or not it existed.

        Returns:
            True if a mapping was removed

        Raises:
            ValidationError: If year, id or side is invalid
        """
        year = parse_financial_year(year)
        account_head_id = require_identifier(account_head_id, "accountHeadId")
        side = normalize_side(side)

        removed = self.db.delete_report_mapping(society_id, year, account_head_id, side.value)
        if removed:
            logger.info("Removed mapping of head %s %s for %s", account_head_id, side.value, year)
        return removed

    def bulk_set_mappings(
        self,
        society_id: int,
        year: Union[int, str],
        mappings: Mapping[str, Mapping[str, Any]],
    ) -> dict[str, ReportMapping]:
        """Upsert many mappings keyed by '<accountHeadId>:<side>'.

        Malformed keys, and keys naming a head outside the society, are
        dropped. Each value carries ``reportType`` and an
        optional ``totalAmount``; the side always comes from the key. Nothing
        is written if any accepted value is invalid or would break the
        balance sheet side rule.

        Returns:
            The year's full mapping dict after the write

        Raises:
            ValidationError: If year is invalid or an accepted value is invalid
            NotFoundError: If the society does not exist
            ConflictError: If both sides of a head would be on the balance sheet
        """
        year = parse_financial_year(year)
        self._require_society(society_id)

        records: dict[tuple[int, Side], tuple[ReportType, Decimal]] = {}
        for key, value in (mappings or {}).items():
            parsed = parse_composite_key(key)
            if parsed is None:
                logger.debug("Dropping malformed mapping key %r", key)
                continue
            if not isinstance(value, Mapping):
                raise ValidationError(f"Mapping for '{key}' must be an object")
            report_type = normalize_report_type(value.get("reportType"))
            try:
                total_amount = Decimal(str(value.get("totalAmount", 0) or 0))
            except InvalidOperation:
                raise ValidationError(f"Invalid totalAmount for '{key}'")
            records[parsed] = (report_type, total_amount)

        heads = self.db.get_account_heads({head_id for head_id, _ in records})
        for row in list(records):
            head = heads.get(row[0])
            if head is None or head.society_id != society_id:
                logger.debug("Dropping mapping for unknown account head %s", row[0])
                del records[row]

        balance_sheet = {
            row for row in self._balance_sheet_rows(society_id, year) if row not in records
        }
        balance_sheet.update(
            row for row, (report_type, _) in records.items()
            if report_type is ReportType.BALANCE_SHEET
        )
        for account_head_id, side in balance_sheet:
            if side is Side.DEBIT and (account_head_id, Side.CREDIT) in balance_sheet:
                raise ConflictError(balance_sheet_side_conflict(account_head_id, side.value))

        if records:
            self.db.upsert_report_mappings(
                society_id,
                year,
                [
                    (account_head_id, side.value, report_type.value, total_amount)
                    for (account_head_id, side), (report_type, total_amount) in records.items()
                ],
            )
            logger.info("Bulk mapped %d rows for society %s year %s", len(records), society_id, year)
        return self.get_mappings(society_id, year)

    def get_mappings(self, society_id: int, year: Union[int, str]) -> dict[str, ReportMapping]:
        """Return a year's mappings keyed by '<accountHeadId>:<side>'.

        Raises:
            ValidationError: If year is invalid
        """
        year = parse_financial_year(year)
        return {m.composite_key: m for m in self.db.list_report_mappings(society_id, year=year)}

    def list_mappings(
        self,
        society_id: int,
        year: Union[int, str, None] = None,
        report_type: Union[ReportType, str, None] = None,
    ) -> list[ReportMapping]:
        """List mappings across years, optionally filtered."""
        if year is not None:
            year = parse_financial_year(year)
        if report_type is not None:
            report_type = normalize_report_type(report_type).value
        return self.db.list_report_mappings(society_id, year=year, report_type=report_type)
