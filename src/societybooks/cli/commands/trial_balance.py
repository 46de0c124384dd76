"""Trial balance and financial year commands."""

import click
from societybooks.cli.error_handling import handle_domain_error, handle_storage_error
from societybooks.cli.society_resolution import resolve_society_or_exit
from societybooks.domain.balance import BalanceService
from societybooks.domain.errors import StorageError
from societybooks.domain.financial_year import financial_year_label
from societybooks.domain.society import SocietyService


@click.command("trial-balance")
@click.argument("society", metavar="SOCIETY")
@click.option("--year", required=True, help="Financial year (e.g., 2024 or 2024-2025)")
@click.pass_context
def trial_balance(ctx, society: str, year: str):
    """Show a society's trial balance for one financial year.

    Rows list each account head's debit and credit totals for the year.
    Heads mapped to a report without activity in the year appear with zero
    totals.

    Examples:
        societybooks trial-balance 1 --year 2024
        societybooks trial-balance "Shanti Nagar CHS" --year 2024-2025
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        tb = BalanceService(db).trial_balance(society_id, year)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nTrial balance {financial_year_label(tb.year)}")
    click.echo("=" * 72)
    click.echo(f"{'ID':>4}  {'Account head':<36} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 72)
    for row in tb.rows:
        click.echo(
            f"{row.account_head_id:>4}  {row.account_head_name:<36.36} "
            f"{row.debit:>14,.2f} {row.credit:>14,.2f}"
        )
    click.echo("-" * 72)
    click.echo(f"{'':>4}  {'Total':<36} {tb.total_debit:>14,.2f} {tb.total_credit:>14,.2f}")
    click.echo()
    click.echo(f"Opening balance: {tb.opening_balance:,.2f}")
    click.echo(f"Closing balance: {tb.closing_balance:,.2f}")


@click.command("years")
@click.argument("society", metavar="SOCIETY")
@click.option("--balances", is_flag=True, help="Show opening and closing balance of each year")
@click.pass_context
def years(ctx, society: str, balances: bool):
    """List the financial years in which a society has entries, most recent first."""
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)
    service = BalanceService(db)

    try:
        labels = service.available_years(society_id)
        if not balances:
            for label in labels:
                click.echo(label)
            return

        year_balances = service.year_balances(society_id, labels[0]) if labels else []
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{'Year':<10} {'Opening':>14} {'Debit':>14} {'Credit':>14} {'Closing':>14}")
    click.echo("-" * 70)
    for yb in reversed(year_balances):
        click.echo(
            f"{financial_year_label(yb.year):<10} {yb.opening_balance:>14,.2f} "
            f"{yb.total_debit:>14,.2f} {yb.total_credit:>14,.2f} {yb.closing_balance:>14,.2f}"
        )


def register_commands(cli):
    """Register trial balance commands with main CLI."""
    cli.add_command(trial_balance)
    cli.add_command(years)
