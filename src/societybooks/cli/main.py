"""Main CLI entry point."""

import logging

import click
from societybooks.database.factories import DB_PATH_ENV, create_sqlite_database

# Import and register all commands at module level
from societybooks.cli.commands import (
    society,
    head,
    entry,
    trial_balance,
    report,
)

LOG_LEVEL_ENV = "SOCIETYBOOKS_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Societybooks - Cash book and annual reports for cooperative societies.

    Record cash book entries against account heads, inspect yearly trial
    balances, and map trial balance rows to the Profit & Loss account,
    Balance Sheet and Construction statement.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
society.register_commands(cli)
head.register_commands(cli)
entry.register_commands(cli)
trial_balance.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
