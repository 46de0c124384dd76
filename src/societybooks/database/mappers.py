"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so services never hold ORM objects
attached to a session.
"""

from decimal import Decimal

from societybooks.domain import entities as domain
from societybooks.database.models import (
    Society as ORMSociety,
    AccountHead as ORMAccountHead,
    CashBookEntry as ORMCashBookEntry,
    ReportMapping as ORMReportMapping,
)


def _decimal(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def society_to_domain(orm_society: ORMSociety) -> domain.Society:
    """Convert SQLAlchemy Society model to domain Society entity."""
    return domain.Society(
        id=orm_society.id,
        name=orm_society.name,
        secretary_name=orm_society.secretary_name,
        taluka=orm_society.taluka,
        district=orm_society.district,
        address=orm_society.address,
        society_type=orm_society.society_type,
        initial_balance=_decimal(orm_society.initial_balance),
        financial_year_start=orm_society.financial_year_start,
        financial_year_end=orm_society.financial_year_end,
        created_at=orm_society.created_at,
    )


def account_head_to_domain(orm_head: ORMAccountHead) -> domain.AccountHead:
    """Convert SQLAlchemy AccountHead model to domain AccountHead entity."""
    return domain.AccountHead(
        id=orm_head.id,
        society_id=orm_head.society_id,
        head_type=orm_head.head_type,
        name=orm_head.name,
        category=orm_head.category,
        opening_amount=_decimal(orm_head.opening_amount),
        created_at=orm_head.created_at,
    )


def entry_to_domain(orm_entry: ORMCashBookEntry) -> domain.CashBookEntry:
    """Convert SQLAlchemy CashBookEntry model to domain entity with its head name."""
    head = orm_entry.account_head
    return domain.CashBookEntry(
        id=orm_entry.id,
        society_id=orm_entry.society_id,
        date=orm_entry.date,
        entry_type=orm_entry.entry_type,
        account_head_id=orm_entry.account_head_id,
        amount=_decimal(orm_entry.amount),
        description=orm_entry.description,
        created_at=orm_entry.created_at,
        account_head_name=head.name if head is not None else None,
    )


def report_mapping_to_domain(orm_mapping: ORMReportMapping) -> domain.ReportMapping:
    """Convert SQLAlchemy ReportMapping model to domain ReportMapping entity."""
    return domain.ReportMapping(
        id=orm_mapping.id,
        society_id=orm_mapping.society_id,
        year=orm_mapping.year,
        account_head_id=orm_mapping.account_head_id,
        side=orm_mapping.side,
        report_type=orm_mapping.report_type,
        total_amount=_decimal(orm_mapping.total_amount),
        updated_at=orm_mapping.updated_at,
    )
