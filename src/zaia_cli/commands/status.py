"""Status command - Show the stored identity."""

from __future__ import annotations

import click

from zaia_cli.commands.common import get_store, require_credentials
from zaia_cli.output import SyncResponse, sync


@click.command("status")
@click.pass_context
def status_command(ctx: click.Context) -> SyncResponse:
    """Show authentication status and the active project."""
    require_credentials(ctx)
    data = get_store(ctx).load()

    return sync(
        {
            "authenticated": True,
            "user": {"name": data.user.name, "email": data.user.email},
            "project": {"id": data.project.id, "name": data.project.name},
            "region": data.region_data.name,
            "apiHost": data.api_host,
        }
    )
