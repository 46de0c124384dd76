"""Tests for the legacy report mapping migration."""

import importlib.util
import json
from decimal import Decimal
from pathlib import Path

import pytest

from societybooks.domain.entities import Side

MIGRATION_PATH = Path(__file__).parent.parent / "migrations" / "migrate_legacy_report_mappings.py"


@pytest.fixture(scope="module")
def migration():
    module_spec = importlib.util.spec_from_file_location("migrate_legacy_report_mappings", MIGRATION_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_upgrade_key(migration):
    """Test upgrading bare and composite keys."""
    assert migration.upgrade_key("7:credit", {}) == (7, Side.CREDIT)
    assert migration.upgrade_key("7", {"side": "Debit"}) == (7, Side.DEBIT)
    assert migration.upgrade_key("7", {}) is None
    assert migration.upgrade_key("abc", {"side": "debit"}) is None


def test_migrate_upgrades_and_skips(migration, temp_db, sample_society, sample_entries, tmp_path, capsys):
    """Test importing a legacy export with bare, composite and broken keys."""
    rent_id = sample_entries["Rent"].account_head_id
    salary_id = sample_entries["Salary"].account_head_id
    source = tmp_path / "export.json"
    source.write_text(json.dumps([
        {
            "societyId": sample_society.id,
            "year": "2023-2024",
            "mappings": {
                str(rent_id): {"reportType": "profitLoss", "side": "debit", "totalAmount": 111},
                f"{rent_id}:debit": {"reportType": "profitLoss", "totalAmount": 500},
                str(salary_id): {"reportType": "balanceSheet", "side": "credit", "totalAmount": 200},
                "oops": {"reportType": "profitLoss"},
                "999:debit": {"reportType": "profitLoss"},
            },
        },
        {"societyId": 999, "year": 2023, "mappings": {}},
    ]))

    written = migration.migrate_database(str(source), database_path=temp_db.database_path)

    assert written == 2
    mappings = {m.composite_key: m for m in temp_db.list_report_mappings(sample_society.id, year=2023)}
    assert set(mappings) == {f"{rent_id}:debit", f"{salary_id}:credit"}
    assert mappings[f"{rent_id}:debit"].total_amount == Decimal("500")
    assert mappings[f"{salary_id}:credit"].report_type == "balanceSheet"
    out = capsys.readouterr().out
    assert "oops: unrecognised key" in out
    assert "999:debit: unknown account head" in out
    assert "999/2023: unknown society" in out


def test_migrate_is_idempotent_and_keeps_existing_records(
    migration, temp_db, mapping_service, sample_society, sample_entries, tmp_path
):
    """Test that bare keys never overwrite records that already exist."""
    rent_id = sample_entries["Rent"].account_head_id
    mapping_service.set_mapping(sample_society.id, 2023, rent_id, "debit", "construction")
    source = tmp_path / "export.json"
    source.write_text(json.dumps({
        "societyId": sample_society.id,
        "year": 2023,
        "mappings": {str(rent_id): {"reportType": "profitLoss", "side": "debit", "totalAmount": 1}},
    }))

    assert migration.migrate_database(str(source), database_path=temp_db.database_path) == 0
    assert migration.migrate_database(str(source), database_path=temp_db.database_path) == 0

    mappings = mapping_service.get_mappings(sample_society.id, 2023)
    assert mappings[f"{rent_id}:debit"].report_type == "construction"


def test_migrate_skips_head_with_both_sides_on_balance_sheet(
    migration, temp_db, sample_society, sample_entries, tmp_path, capsys
):
    """Test that a head is never mapped to the balance sheet on both sides."""
    rent_id = sample_entries["Rent"].account_head_id
    salary_id = sample_entries["Salary"].account_head_id
    source = tmp_path / "export.json"
    source.write_text(json.dumps({
        "societyId": sample_society.id,
        "year": 2023,
        "mappings": {
            str(rent_id): {"reportType": "balanceSheet", "side": "debit", "totalAmount": 500},
            f"{rent_id}:credit": {"reportType": "balanceSheet", "totalAmount": 0},
            f"{salary_id}:credit": {"reportType": "profitLoss", "totalAmount": 200},
        },
    }))

    written = migration.migrate_database(str(source), database_path=temp_db.database_path)

    assert written == 1
    keys = {m.composite_key for m in temp_db.list_report_mappings(sample_society.id, year=2023)}
    assert keys == {f"{salary_id}:credit"}
    assert f"{rent_id}: both sides mapped to balanceSheet" in capsys.readouterr().out


def test_migrate_checks_balance_sheet_against_existing_records(
    migration, temp_db, mapping_service, sample_society, sample_entries, tmp_path
):
    """Test that an imported row cannot pair with a stored balance sheet row."""
    rent_id = sample_entries["Rent"].account_head_id
    mapping_service.set_mapping(sample_society.id, 2023, rent_id, "debit", "balanceSheet")
    source = tmp_path / "export.json"
    source.write_text(json.dumps({
        "societyId": sample_society.id,
        "year": 2023,
        "mappings": {f"{rent_id}:credit": {"reportType": "balanceSheet", "totalAmount": 0}},
    }))

    assert migration.migrate_database(str(source), database_path=temp_db.database_path) == 0

    mappings = mapping_service.get_mappings(sample_society.id, 2023)
    assert set(mappings) == {f"{rent_id}:debit"}


def test_migrate_rejects_documents_without_year(migration, temp_db, tmp_path):
    source = tmp_path / "export.json"
    source.write_text(json.dumps({"societyId": 1, "mappings": {}}))

    with pytest.raises(ValueError, match="societyId"):
        migration.migrate_database(str(source), database_path=temp_db.database_path)
