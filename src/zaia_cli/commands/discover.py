"""Discover command - Describe the project and its services."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import SyncResponse, sync


@click.command("discover")
@click.option("--service", help="Show details for one service (hostname)")
@click.option("--include-envs", is_flag=True, help="Include environment variables")
@click.pass_context
def discover_command(ctx: click.Context, service: str | None, include_envs: bool) -> SyncResponse:
    """Discover the project and its services."""
    from zaia_cli.services.discover import discover

    creds = require_credentials(ctx)
    client = platform_client(ctx, creds)

    return sync(discover(client, creds.project_id, hostname=service, include_envs=include_envs))
