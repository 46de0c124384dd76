"""CLI error handling helpers."""

import logging

import click

from societybooks.domain.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_storage_error(ctx: click.Context, error: StorageError) -> None:
    """Report a storage failure without leaking database details."""
    logger.debug("Command aborted by storage failure: %s", error)
    click.echo("Error: storage failure, see log", err=True)
    ctx.exit(1)
