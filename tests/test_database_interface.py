"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from societybooks.domain import entities
from societybooks.domain.errors import NotFoundError, StorageError


@pytest.fixture
def society_id(temp_db):
    return temp_db.create_society(
        name="Test Society",
        society_type="housing",
        financial_year_start=date(2023, 4, 1),
        financial_year_end=date(2024, 3, 31),
        initial_balance=Decimal("1000"),
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_society_returns_domain_model(self, temp_db, society_id):
        """Test that get_society returns a domain Society entity."""
        society = temp_db.get_society(society_id)

        assert isinstance(society, entities.Society)
        assert society.id == society_id
        assert society.initial_balance == Decimal("1000")
        assert society.financial_year_start == date(2023, 4, 1)
        assert isinstance(society.created_at, datetime)

    def test_get_missing_rows_return_none(self, temp_db):
        """Test that lookups of missing rows return None."""
        assert temp_db.get_society(1) is None
        assert temp_db.get_account_head(1) is None
        assert temp_db.get_entry(1) is None

    def test_update_society(self, temp_db, society_id):
        """Test updating society columns."""
        temp_db.update_society(society_id, taluka="Mulshi")

        assert temp_db.get_society(society_id).taluka == "Mulshi"
        with pytest.raises(NotFoundError):
            temp_db.update_society(999, taluka="Mulshi")

    def test_find_account_head_is_exact(self, temp_db, society_id):
        """Test that head lookup by name is exact and optionally typed."""
        head_id = temp_db.create_account_head(society_id, head_type="Debit", name="Rent")

        assert temp_db.find_account_head(society_id, "Rent").id == head_id
        assert temp_db.find_account_head(society_id, "Rent", head_type="Debit").id == head_id
        assert temp_db.find_account_head(society_id, "Rent", head_type="Credit") is None
        assert temp_db.find_account_head(society_id, "rent") is None

    def test_get_account_heads_batches(self, temp_db, society_id):
        """Test fetching several heads keyed by id."""
        a = temp_db.create_account_head(society_id, head_type="Debit", name="A")
        b = temp_db.create_account_head(society_id, head_type="Credit", name="B")

        heads = temp_db.get_account_heads([a, b, 999])

        assert set(heads) == {a, b}
        assert all(isinstance(h, entities.AccountHead) for h in heads.values())
        assert temp_db.get_account_heads([]) == {}

    def test_entries_carry_head_name(self, temp_db, society_id):
        """Test that entries are returned with their head's name."""
        head_id = temp_db.create_account_head(society_id, head_type="Credit", name="Dues")
        entry_id = temp_db.create_entry(
            society_id=society_id,
            date=date(2023, 6, 1),
            entry_type="Credit",
            account_head_id=head_id,
            amount=Decimal("99.90"),
        )

        entry = temp_db.get_entry(entry_id)

        assert isinstance(entry, entities.CashBookEntry)
        assert entry.account_head_name == "Dues"
        assert entry.amount == Decimal("99.90")
        assert entry.is_debit is False

    def test_list_entries_filters(self, temp_db, society_id):
        """Test date and head filters on entry listing."""
        rent = temp_db.create_account_head(society_id, head_type="Debit", name="Rent")
        dues = temp_db.create_account_head(society_id, head_type="Credit", name="Dues")
        for day, head in ((date(2023, 5, 1), rent), (date(2023, 8, 1), dues), (date(2024, 5, 1), rent)):
            temp_db.create_entry(society_id, day, "Debit", head, Decimal("1"))

        in_year = temp_db.list_entries(society_id, start_date=date(2023, 4, 1), end_date=date(2024, 3, 31))
        rent_only = temp_db.list_entries(society_id, account_head_id=rent)

        assert [e.date for e in in_year] == [date(2023, 5, 1), date(2023, 8, 1)]
        assert [e.date for e in rent_only] == [date(2023, 5, 1), date(2024, 5, 1)]
        assert temp_db.get_earliest_entry_date(society_id) == date(2023, 5, 1)
        assert len(temp_db.list_entry_dates(society_id)) == 3

    def test_delete_entries_counts(self, temp_db, society_id):
        """Test bulk deletion returns the number of rows removed."""
        head = temp_db.create_account_head(society_id, head_type="Debit", name="Rent")
        ids = [temp_db.create_entry(society_id, date(2023, 5, d), "Debit", head, Decimal("1")) for d in (1, 2)]

        assert temp_db.delete_entries(ids + [999]) == 2
        assert temp_db.delete_entry(ids[0]) is False

    def test_upsert_report_mappings_keeps_one_row(self, temp_db, society_id):
        """Test that a row is unique per (society, year, head, side)."""
        head = temp_db.create_account_head(society_id, head_type="Debit", name="Rent")
        temp_db.upsert_report_mappings(society_id, 2023, [(head, "debit", "profitLoss", Decimal("10"))])
        temp_db.upsert_report_mappings(society_id, 2023, [(head, "debit", "balanceSheet", Decimal("20"))])

        mappings = temp_db.list_report_mappings(society_id)

        assert len(mappings) == 1
        assert isinstance(mappings[0], entities.ReportMapping)
        assert mappings[0].report_type == "balanceSheet"
        assert mappings[0].total_amount == Decimal("20")
        assert temp_db.delete_report_mapping(society_id, 2023, head, "debit") is True
        assert temp_db.delete_report_mapping(society_id, 2023, head, "debit") is False

    def test_storage_failure_is_wrapped(self, temp_db, society_id):
        """Test that SQLAlchemy errors surface as StorageError."""
        session = temp_db._get_session()
        with patch.object(session, "query", side_effect=OperationalError("SELECT", {}, Exception("disk I/O error"))):
            with pytest.raises(StorageError):
                temp_db.list_societies()
