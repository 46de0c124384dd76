"""Tests for the financial year balance engine."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from societybooks.domain.balance import group_by_head, net_movement
from societybooks.domain.entities import CashBookEntry, ReportType, Side
from societybooks.domain.errors import NotFoundError, ValidationError
from societybooks.domain.financial_year import financial_year_label, financial_year_of


def _entry(entry_id, head_id, entry_type, amount):
    return CashBookEntry(
        id=entry_id,
        society_id=1,
        date=date(2024, 5, 1),
        entry_type=entry_type,
        account_head_id=head_id,
        amount=Decimal(amount),
        description=None,
        created_at=datetime(2024, 5, 1),
    )


def test_net_movement_treats_any_non_debit_as_credit():
    """Test that only 'debit' in any casing counts as debit."""
    entries = [
        _entry(1, 1, "Debit", "100"),
        _entry(2, 1, "debit", "50"),
        _entry(3, 2, "Credit", "30"),
        _entry(4, 2, "refund", "20"),
    ]

    debit, credit = net_movement(entries)

    assert debit == Decimal("150")
    assert credit == Decimal("50")


def test_group_by_head_keeps_first_appearance_order():
    """Test that heads are grouped in the order they first appear."""
    entries = [
        _entry(1, 9, "Credit", "10"),
        _entry(2, 3, "Debit", "5"),
        _entry(3, 9, "Debit", "7"),
    ]

    totals = group_by_head(entries)

    assert list(totals) == [9, 3]
    assert totals[9].debit == Decimal("7")
    assert totals[9].credit == Decimal("10")
    assert totals[3].credit == Decimal("0")


def test_trial_balance_first_year_scenario(balance_service, sample_society, sample_entries):
    """Test the trial balance of the society's first year."""
    tb = balance_service.trial_balance(sample_society.id, 2023)

    assert tb.opening_balance == Decimal("1000")
    rows = {row.account_head_name: row for row in tb.rows}
    assert [row.account_head_name for row in tb.rows] == ["Rent", "Salary"]
    assert rows["Rent"].debit == Decimal("500")
    assert rows["Rent"].credit == Decimal("0")
    assert rows["Salary"].debit == Decimal("0")
    assert rows["Salary"].credit == Decimal("200")
    assert tb.total_debit == Decimal("500")
    assert tb.total_credit == Decimal("200")
    assert tb.closing_balance == Decimal("1300")


def test_trial_balance_next_year_without_entries(balance_service, sample_society, sample_entries):
    """Test that an empty year opens and closes at the previous closing balance."""
    tb = balance_service.trial_balance(sample_society.id, 2024)

    assert tb.opening_balance == Decimal("1300")
    assert tb.closing_balance == Decimal("1300")
    assert tb.rows == ()


def test_trial_balance_includes_zero_row_for_mapped_head(
    temp_db, balance_service, sample_society, sample_entries
):
    """Test that a head mapped for a year without activity gets a zero row."""
    rent = sample_entries["Rent"]
    temp_db.upsert_report_mappings(
        sample_society.id,
        2024,
        [(rent.account_head_id, Side.DEBIT.value, ReportType.BALANCE_SHEET.value, Decimal("0"))],
    )

    tb = balance_service.trial_balance(sample_society.id, "2024-2025")

    assert len(tb.rows) == 1
    assert tb.rows[0].account_head_id == rent.account_head_id
    assert tb.rows[0].account_head_name == "Rent"
    assert tb.rows[0].debit == Decimal("0")
    assert tb.rows[0].credit == Decimal("0")
    assert tb.closing_balance == Decimal("1300")


def test_opening_closing_chain(balance_service, sample_society, record):
    """Test that each year opens at the previous year's close."""
    record(sample_society.id, date(2023, 7, 1), "Debit", "Maintenance", 1200)
    record(sample_society.id, date(2024, 3, 31), "Credit", "Electricity", 300)
    record(sample_society.id, date(2024, 4, 1), "Credit", "Repairs", 450)
    record(sample_society.id, date(2026, 1, 15), "Debit", "Maintenance", 800)

    chain = balance_service.year_balances(sample_society.id, 2025)

    assert [yb.year for yb in chain] == [2023, 2024, 2025]
    assert chain[0].opening_balance == Decimal("1000")
    for previous, current in zip(chain, chain[1:]):
        assert current.opening_balance == previous.closing_balance
    assert chain[0].closing_balance == Decimal("1900")
    assert chain[1].closing_balance == Decimal("1450")
    assert chain[2].closing_balance == Decimal("2250")


def test_conservation_holds_for_every_year(balance_service, sample_society, record):
    """Test closing = opening + debit - credit for the row sums of each year."""
    record(sample_society.id, date(2023, 8, 1), "Debit", "Dues", 700)
    record(sample_society.id, date(2023, 9, 1), "Credit", "Repairs", 250)
    record(sample_society.id, date(2024, 8, 1), "Credit", "Repairs", 900)

    for year in (2023, 2024, 2025):
        tb = balance_service.trial_balance(sample_society.id, year)
        row_debit = sum((row.debit for row in tb.rows), Decimal("0"))
        row_credit = sum((row.credit for row in tb.rows), Decimal("0"))
        assert tb.total_debit == row_debit
        assert tb.total_credit == row_credit
        assert tb.closing_balance == tb.opening_balance + row_debit - row_credit


def test_opening_balance_of_first_year_and_earlier(balance_service, sample_society, sample_entries):
    """Test that the first year and any earlier year open at the initial balance."""
    assert balance_service.opening_balance(sample_society.id, 2023) == Decimal("1000")
    assert balance_service.opening_balance(sample_society.id, 2020) == Decimal("1000")
    assert balance_service.opening_balance(sample_society.id, 2025) == Decimal("1300")


def test_first_year_uses_recorded_start(balance_service, sample_society, sample_entries):
    """Test that the recorded financial year start anchors the chain."""
    assert balance_service.first_year(sample_society.id) == 2023


def test_head_totals_for_one_head(balance_service, sample_society, sample_entries, record):
    """Test per-head totals within a year."""
    record(sample_society.id, date(2023, 10, 1), "Credit", "Rent", 120)
    rent_id = sample_entries["Rent"].account_head_id

    totals = balance_service.head_totals(sample_society.id, 2023, rent_id)

    assert totals.debit == Decimal("500")
    assert totals.credit == Decimal("120")
    assert totals.side_total(Side.CREDIT) == Decimal("120")


def test_available_years_most_recent_first(balance_service, sample_society, record):
    """Test that available years come from entry dates, most recent first."""
    record(sample_society.id, date(2023, 5, 1), "Debit", "Dues", 10)
    record(sample_society.id, date(2025, 2, 1), "Debit", "Dues", 10)
    record(sample_society.id, date(2025, 6, 1), "Debit", "Dues", 10)

    assert balance_service.available_years(sample_society.id) == ["2025-2026", "2024-2025", "2023-2024"]


def test_available_years_without_entries(balance_service, sample_society):
    """Test that a society without entries reports its first year."""
    assert balance_service.available_years(sample_society.id) == ["2023-2024"]


def test_trial_balance_rejects_bad_year(balance_service, sample_society):
    """Test that an unreadable year is a validation error."""
    with pytest.raises(ValidationError):
        balance_service.trial_balance(sample_society.id, "next year")


def test_trial_balance_unknown_society(balance_service):
    """Test that an unknown society is reported as not found."""
    with pytest.raises(NotFoundError):
        balance_service.trial_balance(999, 2023)


def test_trial_balance_rejects_year_past_calendar_range(balance_service, sample_society):
    """Test that a year whose last day cannot be a date is a validation error."""
    with pytest.raises(ValidationError):
        balance_service.trial_balance(sample_society.id, 10000)
    with pytest.raises(ValidationError):
        balance_service.opening_balance(sample_society.id, "9999-10000")


def test_first_year_moves_back_for_earlier_entry(
    balance_service, cashbook_service, sample_society, sample_entries
):
    """Test that an entry before the recorded start becomes the first year."""
    cashbook_service.update_entry(sample_entries["Rent"].id, date=date(2022, 6, 1))

    assert balance_service.first_year(sample_society.id) == 2022
    assert balance_service.opening_balance(sample_society.id, 2022) == Decimal("1000")
    assert balance_service.opening_balance(sample_society.id, 2023) == Decimal("1500")
    assert balance_service.available_years(sample_society.id) == ["2023-2024", "2022-2023"]


def test_first_year_falls_back_to_creation_date(temp_db, balance_service):
    """Test that a society without a recorded start anchors on its creation date."""
    society_id = temp_db.create_society(
        name="Undated CHS",
        society_type="housing",
        financial_year_start=None,
        financial_year_end=None,
        initial_balance=Decimal("250"),
    )
    created_year = financial_year_of(temp_db.get_society(society_id).created_at)

    assert balance_service.first_year(society_id) == created_year
    assert balance_service.available_years(society_id) == [financial_year_label(created_year)]
    assert balance_service.opening_balance(society_id, created_year) == Decimal("250")
