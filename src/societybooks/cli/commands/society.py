"""Society management commands."""

import click
from societybooks.cli.error_handling import handle_domain_error, handle_storage_error
from societybooks.cli.society_resolution import resolve_society_or_exit
from societybooks.domain.errors import StorageError
from societybooks.domain.financial_year import financial_year_range
from societybooks.domain.society import SocietyService
from societybooks.utils.amount_parser import parse_amount
from societybooks.utils.date_parser import parse_date


def _parse_optional_date(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def society_group():
    """Manage societies."""
    pass


@society_group.command("create")
@click.argument("name", metavar="SOCIETY_NAME")
@click.option(
    "--type", "society_type",
    type=click.Choice(["housing", "labour"], case_sensitive=False),
    default="housing",
    show_default=True,
    help="Kind of society",
)
@click.option("--year", type=int, help="Calendar year in which the first financial year starts")
@click.option("--fy-start", help="First day of the first financial year (overrides --year)")
@click.option("--fy-end", help="Last day of the first financial year (overrides --year)")
@click.option("--initial-balance", default="0", help="Cash balance at inception")
@click.option("--secretary", default="", help="Secretary's name")
@click.option("--taluka", default="", help="Taluka")
@click.option("--district", default="", help="District")
@click.option("--address", default="", help="Registered address")
@click.pass_context
def create_society(
    ctx,
    name: str,
    society_type: str,
    year: int | None,
    fy_start: str | None,
    fy_end: str | None,
    initial_balance: str,
    secretary: str,
    taluka: str,
    district: str,
    address: str,
):
    """Create a new society.

    The first financial year is given either with --year (April to March)
    or with explicit --fy-start and --fy-end dates.

    Examples:
        societybooks society create "Shanti Nagar CHS" --year 2023
        societybooks society create "Kamgar Sahakari" --type labour --fy-start 2024-04-01 --fy-end 2025-03-31
    """
    db = ctx.obj["db"]
    service = SocietyService(db)

    start = _parse_optional_date(ctx, fy_start, "financial year start")
    end = _parse_optional_date(ctx, fy_end, "financial year end")
    if year is not None:
        default_start, default_end = financial_year_range(year)
        start = start or default_start
        end = end or default_end
    if start is None or end is None:
        click.echo("Error: Provide --year or both --fy-start and --fy-end", err=True)
        ctx.exit(1)

    try:
        balance = parse_amount(initial_balance)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        society_id = service.create_society(
            name=name,
            society_type=society_type,
            financial_year_start=start,
            financial_year_end=end,
            initial_balance=balance,
            secretary_name=secretary,
            taluka=taluka,
            district=district,
            address=address,
        )
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created society '{name}' (ID: {society_id})")


@society_group.command("list")
@click.pass_context
def list_societies(ctx):
    """List all societies, newest first."""
    db = ctx.obj["db"]
    service = SocietyService(db)

    societies = service.list_societies()
    if not societies:
        click.echo("No societies found.")
        return

    click.echo("\nSocieties:")
    click.echo("-" * 70)
    for s in societies:
        click.echo(
            f"ID: {s.id:3d} | {s.name:30s} | {s.society_type:8s} | Year: {s.current_year or '-'}"
        )


@society_group.command("show")
@click.argument("society", metavar="SOCIETY")
@click.pass_context
def show_society(ctx, society: str):
    """Show society details.

    SOCIETY can be a society name or ID.
    """
    db = ctx.obj["db"]
    service = SocietyService(db)
    society_id = resolve_society_or_exit(ctx, service, society)
    s = service.require_society(society_id)

    click.echo(f"\nSociety {s.id}: {s.name}")
    click.echo("-" * 60)
    click.echo(f"Type:            {s.society_type}")
    click.echo(f"Secretary:       {s.secretary_name or '-'}")
    click.echo(f"Taluka:          {s.taluka or '-'}")
    click.echo(f"District:        {s.district or '-'}")
    click.echo(f"Address:         {s.address or '-'}")
    click.echo(f"Initial balance: {s.initial_balance:,.2f}")
    click.echo(f"Financial year:  {s.financial_year_start} to {s.financial_year_end}")


@society_group.command("update")
@click.argument("society", metavar="SOCIETY")
@click.option("--name", help="New name")
@click.option(
    "--type", "society_type",
    type=click.Choice(["housing", "labour"], case_sensitive=False),
    help="Kind of society",
)
@click.option("--fy-start", help="First day of the first financial year")
@click.option("--fy-end", help="Last day of the first financial year")
@click.option("--initial-balance", help="Cash balance at inception")
@click.option("--secretary", help="Secretary's name")
@click.option("--taluka", help="Taluka")
@click.option("--district", help="District")
@click.option("--address", help="Registered address")
@click.pass_context
def update_society(
    ctx,
    society: str,
    name: str | None,
    society_type: str | None,
    fy_start: str | None,
    fy_end: str | None,
    initial_balance: str | None,
    secretary: str | None,
    taluka: str | None,
    district: str | None,
    address: str | None,
) -> None:
    """Update a society.

    SOCIETY can be a society name or ID. Only the options given are changed.

    Examples:
        societybooks society update 1 --secretary "S. Patil"
        societybooks society update "Shanti Nagar CHS" --initial-balance 25000
    """
    db = ctx.obj["db"]
    service = SocietyService(db)
    society_id = resolve_society_or_exit(ctx, service, society)

    balance = None
    if initial_balance is not None:
        try:
            balance = parse_amount(initial_balance)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        updated = service.update_society(
            society_id,
            name=name,
            society_type=society_type,
            financial_year_start=_parse_optional_date(ctx, fy_start, "financial year start"),
            financial_year_end=_parse_optional_date(ctx, fy_end, "financial year end"),
            initial_balance=balance,
            secretary_name=secretary,
            taluka=taluka,
            district=district,
            address=address,
        )
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated society '{updated.name}'")


def register_commands(cli):
    """Register society commands with main CLI."""
    cli.add_command(society_group, name="society")
