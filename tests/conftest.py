"""Shared pytest fixtures for societybooks tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from societybooks.database.factories import create_sqlite_database
from societybooks.domain.account_head import AccountHeadService
from societybooks.domain.balance import BalanceService
from societybooks.domain.cashbook import CashBookService
from societybooks.domain.report_mapping import ReportMappingService
from societybooks.domain.reports import ReportService
from societybooks.domain.society import SocietyService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def society_service(temp_db):
    """Create a SocietyService with a temporary database."""
    return SocietyService(temp_db)


@pytest.fixture
def head_service(temp_db):
    """Create an AccountHeadService with a temporary database."""
    return AccountHeadService(temp_db)


@pytest.fixture
def cashbook_service(temp_db):
    """Create a CashBookService with a temporary database."""
    return CashBookService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def mapping_service(temp_db, balance_service):
    """Create a ReportMappingService sharing the balance engine."""
    return ReportMappingService(temp_db, balance_service)


@pytest.fixture
def report_service(temp_db, balance_service):
    """Create a ReportService sharing the balance engine."""
    return ReportService(temp_db, balance_service)


@pytest.fixture
def sample_society(society_service):
    """Create a society with initial balance 1000 whose first year is FY 2023."""
    society_id = society_service.create_society(
        name="Shanti Nagar CHS",
        society_type="housing",
        financial_year_start=date(2023, 4, 1),
        financial_year_end=date(2024, 3, 31),
        initial_balance=Decimal("1000"),
        secretary_name="S. Patil",
        taluka="Haveli",
        district="Pune",
    )
    return society_service.get_society(society_id)


@pytest.fixture
def record(head_service, cashbook_service):
    """Return a helper that resolves a head by name and records an entry against it."""

    def _record(society_id, entry_date, entry_type, head_name, amount, description=None):
        head = head_service.resolve_head(society_id, head_name, entry_type)
        return cashbook_service.add_entry(
            society_id=society_id,
            date=entry_date,
            entry_type=entry_type,
            account_head_id=head.id,
            amount=Decimal(str(amount)),
            description=description,
        )

    return _record


@pytest.fixture
def sample_entries(sample_society, record):
    """Record a debit to Rent and a credit to Salary in FY 2023."""
    rent = record(sample_society.id, date(2023, 5, 1), "Debit", "Rent", 500)
    salary = record(sample_society.id, date(2023, 6, 1), "Credit", "Salary", 200)
    return {"Rent": rent, "Salary": salary}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
