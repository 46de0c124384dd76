"""Cash book entry commands."""

import click
from societybooks.cli.error_handling import handle_domain_error, handle_storage_error
from societybooks.cli.society_resolution import resolve_society_or_exit
from societybooks.domain.account_head import AccountHeadService
from societybooks.domain.cashbook import CashBookService
from societybooks.domain.errors import StorageError
from societybooks.domain.society import SocietyService
from societybooks.utils.amount_parser import parse_amount
from societybooks.utils.date_parser import parse_date

ENTRY_TYPES = click.Choice(["debit", "credit"], case_sensitive=False)


def _display_entry(entry) -> None:
    head = entry.account_head_name or f"#{entry.account_head_id}"
    click.echo(
        f"ID: {entry.id:4d} | {entry.date} | {entry.entry_type:6s} | "
        f"{head:25s} | {entry.amount:>12,.2f} | {entry.description or ''}"
    )


@click.group()
def entry_group():
    """Manage cash book entries."""
    pass


@entry_group.command("add")
@click.argument("society", metavar="SOCIETY")
@click.option("--date", "entry_date", required=True, help="Entry date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--type", "entry_type", required=True, type=ENTRY_TYPES, help="Debit or credit")
@click.option("--head", required=True, help="Account head name (created on first use)")
@click.option("--amount", required=True, help="Positive amount (e.g., 1500 or ₹1,500.00)")
@click.option("--description", help="Narration")
@click.pass_context
def add_entry(
    ctx,
    society: str,
    entry_date: str,
    entry_type: str,
    head: str,
    amount: str,
    description: str | None,
):
    """Record a cash book entry.

    The account head is looked up by name in the society and created with
    the entry's type if it does not exist yet.

    Examples:
        societybooks entry add 1 --date 2024-04-05 --type credit --head "Maintenance Charges" --amount 12000
        societybooks entry add "Shanti Nagar CHS" --date today --type debit --head Electricity --amount "₹2,350"
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    service = CashBookService(db)
    try:
        # heads are only created once the entry itself is known to be valid
        service.validate_entry(society_id, parsed_date, entry_type, parsed_amount)
        account_head = AccountHeadService(db).resolve_head(society_id, head, entry_type)
        created = service.add_entry(
            society_id=society_id,
            date=parsed_date,
            entry_type=entry_type,
            account_head_id=account_head.id,
            amount=parsed_amount,
            description=description,
        )
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded entry {created.id}: {created.entry_type} {created.amount:,.2f} to '{account_head.name}'")


@entry_group.command("list")
@click.argument("society", metavar="SOCIETY")
@click.pass_context
def list_entries(ctx, society: str):
    """List a society's cash book entries, oldest first.

    SOCIETY can be a society name or ID.
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    entries = CashBookService(db).list_entries(society_id)
    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} entries:")
    click.echo("-" * 90)
    for entry in entries:
        _display_entry(entry)


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show one cash book entry."""
    db = ctx.obj["db"]
    try:
        entry = CashBookService(db).require_entry(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Entry {entry.id}")
    click.echo("-" * 40)
    click.echo(f"Date:        {entry.date}")
    click.echo(f"Type:        {entry.entry_type}")
    click.echo(f"Head:        {entry.account_head_name or '-'} (ID: {entry.account_head_id})")
    click.echo(f"Amount:      {entry.amount:,.2f}")
    click.echo(f"Description: {entry.description or '-'}")


@entry_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="Entry date")
@click.option("--type", "entry_type", type=ENTRY_TYPES, help="Debit or credit")
@click.option("--head", help="Account head name (created on first use)")
@click.option("--amount", help="Positive amount")
@click.option("--description", help="Narration")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    entry_date: str | None,
    entry_type: str | None,
    head: str | None,
    amount: str | None,
    description: str | None,
) -> None:
    """Update a cash book entry.

    Updates only the fields that are provided.

    Examples:
        societybooks entry update 7 --amount 1250
        societybooks entry update 7 --head "Repairs & Maintenance" --type debit
    """
    db = ctx.obj["db"]
    service = CashBookService(db)

    parsed_date = None
    if entry_date is not None:
        try:
            parsed_date = parse_date(entry_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    parsed_amount = None
    if amount is not None:
        try:
            parsed_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        account_head_id = None
        if head is not None:
            entry = service.validate_update(entry_id, entry_type=entry_type, amount=parsed_amount)
            account_head = AccountHeadService(db).resolve_head(
                entry.society_id, head, entry_type or entry.entry_type
            )
            account_head_id = account_head.id
        service.update_entry(
            entry_id=entry_id,
            date=parsed_date,
            entry_type=entry_type,
            account_head_id=account_head_id,
            description=description,
            amount=parsed_amount,
        )
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated entry {entry_id}")


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a cash book entry."""
    db = ctx.obj["db"]
    service = CashBookService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete entry {entry_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entry(entry_id)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted entry {entry_id}")


@entry_group.command("delete-many")
@click.argument("entry_ids", nargs=-1, metavar="ENTRY_ID...")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entries(ctx, entry_ids: tuple[str, ...], yes: bool):
    """Delete several cash book entries.

    Nothing is deleted if any ID is malformed.

    Examples:
        societybooks entry delete-many 4 5 9 --yes
    """
    db = ctx.obj["db"]
    service = CashBookService(db)

    if entry_ids and not yes and not click.confirm(f"Delete {len(entry_ids)} entries?"):
        click.echo("Deletion cancelled.")
        return

    try:
        deleted = service.delete_entries(list(entry_ids))
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted {deleted} entries")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
