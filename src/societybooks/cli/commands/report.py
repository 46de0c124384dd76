"""Report mapping and report commands."""

import json

import click
from societybooks.cli.error_handling import handle_domain_error, handle_storage_error
from societybooks.cli.society_resolution import resolve_society_or_exit
from societybooks.domain.balance import BalanceService
from societybooks.domain.errors import StorageError
from societybooks.domain.financial_year import financial_year_label, parse_financial_year
from societybooks.domain.report_mapping import ReportMappingService
from societybooks.domain.reports import ReportService
from societybooks.domain.society import SocietyService

SIDES = click.Choice(["debit", "credit"], case_sensitive=False)
REPORT_TYPES = click.Choice(["profitLoss", "balanceSheet", "construction"])

REPORT_TITLES = {
    "profit-loss": "Profit & Loss account",
    "balance-sheet": "Balance Sheet",
    "construction": "Construction statement",
}


@click.group()
def report_group():
    """Map trial balance rows to reports and show the reports."""
    pass


@report_group.command("map")
@click.argument("society", metavar="SOCIETY")
@click.option("--year", required=True, help="Financial year (e.g., 2024 or 2024-2025)")
@click.option("--head-id", required=True, type=int, help="Account head ID")
@click.option("--side", required=True, type=SIDES, help="Trial balance column of the row")
@click.option("--type", "report_type", required=True, type=REPORT_TYPES, help="Target report")
@click.pass_context
def map_row(ctx, society: str, year: str, head_id: int, side: str, report_type: str):
    """Map one trial balance row to a report.

    The row's current total is stored with the mapping.

    Examples:
        societybooks report map 1 --year 2024 --head-id 3 --side debit --type profitLoss
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        mapping = ReportMappingService(db).set_mapping(society_id, year, head_id, side, report_type)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Mapped {mapping.composite_key} to {mapping.report_type} for "
        f"{financial_year_label(mapping.year)} (amount {mapping.total_amount:,.2f})"
    )


@report_group.command("unmap")
@click.argument("society", metavar="SOCIETY")
@click.option("--year", required=True, help="Financial year")
@click.option("--head-id", required=True, type=int, help="Account head ID")
@click.option("--side", required=True, type=SIDES, help="Trial balance column of the row")
@click.pass_context
def unmap_row(ctx, society: str, year: str, head_id: int, side: str):
    """Remove the mapping of one trial balance row."""
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        removed = ReportMappingService(db).clear_mapping(society_id, year, head_id, side)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if removed:
        click.echo(f"Removed mapping {head_id}:{side.lower()}")
    else:
        click.echo(f"No mapping for {head_id}:{side.lower()}")


@report_group.command("import")
@click.argument("society", metavar="SOCIETY")
@click.option("--year", required=True, help="Financial year")
@click.argument("mapping_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_mappings(ctx, society: str, year: str, mapping_file: str):
    """Set many mappings from a JSON file.

    The file holds an object keyed by '<headId>:<side>' whose values carry
    'reportType' and optionally 'totalAmount'. Malformed keys are skipped.

    Examples:
        societybooks report import 1 --year 2024 mappings.json
    """
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        with open(mapping_file, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Error: Could not read mapping file: {e}", err=True)
        ctx.exit(1)
    if not isinstance(payload, dict):
        click.echo("Error: Mapping file must contain a JSON object", err=True)
        ctx.exit(1)

    try:
        mappings = ReportMappingService(db).bulk_set_mappings(society_id, year, payload)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Year now has {len(mappings)} mappings")


@report_group.command("mappings")
@click.argument("society", metavar="SOCIETY")
@click.option("--year", required=True, help="Financial year")
@click.option("--json", "as_json", is_flag=True, help="Print the mappings as a JSON object")
@click.pass_context
def show_mappings(ctx, society: str, year: str, as_json: bool):
    """Show a year's report mappings."""
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)

    try:
        mappings = ReportMappingService(db).get_mappings(society_id, year)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(
            {
                key: {
                    "reportType": m.report_type,
                    "side": m.side,
                    "totalAmount": str(m.total_amount),
                }
                for key, m in mappings.items()
            },
            indent=2,
        ))
        return

    if not mappings:
        click.echo("No mappings found.")
        return
    for key, m in mappings.items():
        click.echo(f"{key:<12} {m.report_type:<14} {m.total_amount:>14,.2f}")


def _show_report(ctx, society: str, year: str | None, kind: str, skip_zero: bool):
    db = ctx.obj["db"]
    society_id = resolve_society_or_exit(ctx, SocietyService(db), society)
    service = ReportService(db, BalanceService(db))
    derive = {
        "profit-loss": service.profit_loss,
        "balance-sheet": service.balance_sheet,
        "construction": service.construction_statement,
    }[kind]

    try:
        selected_year = parse_financial_year(year) if year is not None else None
        lines = derive(society_id)
    except StorageError as e:
        handle_storage_error(ctx, e)
    except ValueError as e:
        handle_domain_error(ctx, e)

    title = REPORT_TITLES[kind]
    if not lines:
        click.echo(f"No {title} lines found.")
        return

    if selected_year is None:
        click.echo(f"\n{title}")
        click.echo("-" * 72)
        for line in lines:
            click.echo(
                f"{financial_year_label(line.year):<10} {line.side:<7} "
                f"{line.account_head_name:<36.36} {line.amount:>14,.2f}"
            )
        return

    summary = service.summarize(
        lines, selected_year, skip_zero=skip_zero or kind == "balance-sheet"
    )
    click.echo(f"\n{title} {financial_year_label(selected_year)}")
    click.echo("=" * 60)
    click.echo("Debit")
    for line in summary.debit_lines:
        click.echo(f"  {line.account_head_name:<40.40} {line.amount:>14,.2f}")
    if not summary.is_profit and summary.balancing_amount:
        click.echo(f"  {'Net loss':<40} {summary.balancing_amount:>14,.2f}")
    click.echo(f"  {'Total':<40} {summary.debit_total_with_balance:>14,.2f}")
    click.echo()
    click.echo("Credit")
    for line in summary.credit_lines:
        click.echo(f"  {line.account_head_name:<40.40} {line.amount:>14,.2f}")
    if summary.is_profit:
        click.echo(f"  {'Net profit':<40} {summary.balancing_amount:>14,.2f}")
    click.echo(f"  {'Total':<40} {summary.credit_total_with_balance:>14,.2f}")


def _report_command(kind: str, help_text: str):
    @click.argument("society", metavar="SOCIETY")
    @click.option("--year", help="Show one financial year as a balanced statement")
    @click.option("--skip-zero", is_flag=True, help="Hide lines with a zero amount")
    @click.pass_context
    def command(ctx, society: str, year: str | None, skip_zero: bool):
        _show_report(ctx, society, year, kind, skip_zero)

    command.__doc__ = help_text
    return report_group.command(kind)(command)


_report_command("profit-loss", "Show the Profit & Loss account.")
_report_command("balance-sheet", "Show the Balance Sheet with balances carried forward.")
_report_command("construction", "Show the Construction statement.")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
