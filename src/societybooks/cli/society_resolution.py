"""CLI helpers for society resolution."""

from __future__ import annotations

import click
from societybooks.domain.society import SocietyService
from societybooks.utils.society_resolver import resolve_society


def resolve_society_or_exit(
    ctx: click.Context, society_service: SocietyService, society: str | int
) -> int:
    """Resolve society name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_society(society_service, society)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
