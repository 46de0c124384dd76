#!/usr/bin/env python3
"""Migration script to import legacy report mapping documents.

Older exports stored one document per society and financial year whose
``mappings`` object was keyed either by a bare account head ID or by the
composite '<accountHeadId>:<side>' form:

    {"societyId": 1, "year": 2024,
     "mappings": {"7": {"reportType": "profitLoss", "side": "debit", "totalAmount": 1200},
                  "9:credit": {"reportType": "balanceSheet", "totalAmount": 500}}}

This migration reads such an export (a single document or a list of them)
and writes one explicit report mapping record per row:
- Bare keys are upgraded to composite form using the value's ``side``
- Keys that cannot be upgraded, or name unknown heads, are skipped and reported
- Existing records win over upgraded bare keys, so the script can be re-run
- A head whose debit and credit rows would both land on the balance sheet is
  left as it is and reported

Usage:
    python migrations/migrate_legacy_report_mappings.py --source export.json [--db-path PATH]
"""

import json
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Add src to path so we can import societybooks modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from societybooks.database.factories import create_sqlite_database
from societybooks.domain.entities import ReportType, Side
from societybooks.domain.report_mapping import composite_key, parse_composite_key


def upgrade_key(key: str, value: dict) -> tuple[int, Side] | None:
    """Turn a legacy mapping key into an (account head ID, side) pair.

    Args:
        key: Bare or composite mapping key
        value: Mapping value, whose 'side' is used for bare keys

    Returns:
        (account_head_id, side), or None if the key cannot be upgraded
    """
    parsed = parse_composite_key(key)
    if parsed is not None:
        return parsed
    if not key.isdigit() or int(key) <= 0:
        return None
    side = str(value.get("side") or "").lower()
    if side not in (Side.DEBIT.value, Side.CREDIT.value):
        return None
    return int(key), Side(side)


def convert_document(document: dict, heads: dict, skipped: list[str]) -> dict:
    """Convert one legacy document into upsert records.

    Composite keys take precedence over bare keys naming the same row.

    Returns:
        Dict mapping (account_head_id, side) to (report_type, total_amount, from_bare_key)
    """
    society_id = document["societyId"]
    records = {}
    for key, value in (document.get("mappings") or {}).items():
        if not isinstance(value, dict):
            skipped.append(f"{society_id}/{document['year']}/{key}: value is not an object")
            continue
        row = upgrade_key(str(key), value)
        if row is None:
            skipped.append(f"{society_id}/{document['year']}/{key}: unrecognised key")
            continue
        head = heads.get(row[0])
        if head is None or head.society_id != society_id:
            skipped.append(f"{society_id}/{document['year']}/{key}: unknown account head")
            continue
        try:
            report_type = ReportType(value.get("reportType"))
            total_amount = Decimal(str(value.get("totalAmount", 0) or 0))
        except (ValueError, InvalidOperation):
            skipped.append(f"{society_id}/{document['year']}/{key}: invalid reportType or totalAmount")
            continue

        from_bare_key = parse_composite_key(str(key)) is None
        if from_bare_key and row in records and not records[row][2]:
            continue
        records[row] = (report_type, total_amount, from_bare_key)
    return records


def balance_sheet_conflicts(existing: dict, records: list) -> set[int]:
    """Return heads whose debit and credit rows would both be on the balance sheet.

    Args:
        existing: Dict mapping (account_head_id, side) to the stored report type
        records: Upsert records about to be written for the same society and year
    """
    merged = dict(existing)
    for head_id, side, report_type, _ in records:
        merged[(head_id, Side(side))] = report_type
    balance_sheet = {key for key, report_type in merged.items() if report_type == ReportType.BALANCE_SHEET.value}
    return {head_id for head_id, side in balance_sheet if (head_id, side.opposite) in balance_sheet}


def load_documents(source: str) -> list[dict]:
    """Load legacy documents from a JSON export."""
    with open(source, encoding="utf-8") as f:
        payload = json.load(f)
    documents = payload if isinstance(payload, list) else [payload]
    for document in documents:
        if not isinstance(document, dict) or "societyId" not in document or "year" not in document:
            raise ValueError("Every document needs 'societyId' and 'year'")
        document["societyId"] = int(document["societyId"])
        document["year"] = int(str(document["year"]).split("-")[0])
    return documents


def migrate_database(source: str, database_path: str | None = None) -> int:
    """Import legacy mapping documents as explicit report mapping records.

    Args:
        source: Path to the JSON export
        database_path: Path to database file. If None, uses default location.

    Returns:
        Number of records written

    Raises:
        Exception: If migration fails
    """
    documents = load_documents(source)

    db = create_sqlite_database(database_path=database_path)
    db.connect()
    db.initialize_schema()

    written = 0
    skipped: list[str] = []
    try:
        print(f"Starting migration: {len(documents)} legacy mapping document(s)...")
        for document in documents:
            society_id, year = document["societyId"], document["year"]
            if db.get_society(society_id) is None:
                skipped.append(f"{society_id}/{year}: unknown society")
                continue

            head_ids = set()
            for key in (document.get("mappings") or {}):
                head_part = str(key).split(":")[0]
                if head_part.isdigit():
                    head_ids.add(int(head_part))
            heads = db.get_account_heads(head_ids)

            existing = {
                (m.account_head_id, Side(m.side)): m.report_type
                for m in db.list_report_mappings(society_id, year=year)
            }
            records = [
                (head_id, side.value, report_type.value, total_amount)
                for (head_id, side), (report_type, total_amount, from_bare_key)
                in convert_document(document, heads, skipped).items()
                if not (from_bare_key and (head_id, side) in existing)
            ]
            conflicts = balance_sheet_conflicts(existing, records)
            for head_id in sorted(conflicts):
                skipped.append(f"{society_id}/{year}/{head_id}: both sides mapped to balanceSheet")
            records = [r for r in records if r[0] not in conflicts]
            if records:
                db.upsert_report_mappings(society_id, year, records)
                written += len(records)
                keys = ", ".join(composite_key(r[0], r[1]) for r in records)
                print(f"  Society {society_id}, {year}: wrote {keys}")

        for reason in skipped:
            print(f"  Skipped {reason}")
        print(f"Migration completed successfully! {written} record(s) written, {len(skipped)} skipped")
        return written

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Import legacy report mapping documents as explicit records"
    )
    parser.add_argument(
        "--source",
        type=str,
        required=True,
        help="Path to the JSON export of legacy mapping documents",
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides SOCIETYBOOKS_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(args.source, database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
