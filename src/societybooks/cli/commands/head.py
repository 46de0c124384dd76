"""Account head commands."""

import click
from societybooks.cli.error_handling import handle_domain_error, handle_storage_error
from societybooks.cli.society_resolution import resolve_society_or_exit
from societybooks.domain.account_head import AccountHeadService
from societybooks.domain.entities import HEAD_CATEGORIES
from societybooks.domain.errors import StorageError
from societybooks.domain.society import SocietyService
from societybooks.utils.amount_parser import parse_amount


@click.group()
def head_group():
    """Manage account heads."""
    pass


@head_group.command("list")
@click.argument("society", metavar="SOCIETY")
@click.option("--verbose", "-v", is_flag=True, help="Show IDs, categories and opening amounts")
@click.pass_context
def list_heads(ctx, society: str, verbose: bool):
    """List a society's account heads by side.

    SOCIETY can be a society name or ID.
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)
    service = AccountHeadService(db)

    listing = service.list_heads(society_id)
    if not listing.heads:
        click.echo("No account heads found.")
        return

    if verbose:
        click.echo("\nAccount heads:")
        click.echo("-" * 70)
        for h in listing.heads:
            click.echo(
                f"ID: {h.id:3d} | {h.head_type:6s} | {h.name:30s} | "
                f"{h.category:12s} | {h.opening_amount:,.2f}"
            )
        return

    click.echo("\nDebit heads:")
    for name in listing.debit:
        click.echo(f"  {name}")
    click.echo("\nCredit heads:")
    for name in listing.credit:
        click.echo(f"  {name}")


@head_group.command("add")
@click.argument("society", metavar="SOCIETY")
@click.argument("name", metavar="HEAD_NAME")
@click.option(
    "--type", "head_type",
    required=True,
    type=click.Choice(["debit", "credit"], case_sensitive=False),
    help="Side the head is normally used on",
)
@click.option(
    "--category",
    type=click.Choice(HEAD_CATEGORIES),
    help="Head category (defaults to CashBook)",
)
@click.option("--opening-amount", help="Opening amount of the head")
@click.pass_context
def add_head(
    ctx,
    society: str,
    name: str,
    head_type: str,
    category: str | None,
    opening_amount: str | None,
):
    """Add an account head.

    Examples:
        societybooks head add 1 "Maintenance Charges" --type credit
        societybooks head add "Shanti Nagar CHS" "Building Fund" --type credit --category BalanceSheet
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)
    service = AccountHeadService(db)

    amount = None
    if opening_amount is not None:
        try:
            amount = parse_amount(opening_amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        created = service.add_head(
            society_id=society_id,
            head_type=head_type,
            name=name,
            category=category,
            opening_amount=amount,
        )
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {created.head_type.lower()} head '{created.name}' (ID: {created.id})")


def register_commands(cli):
    """Register account head commands with main CLI."""
    cli.add_command(head_group, name="head")
