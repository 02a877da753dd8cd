"""Events command - Show the project activity timeline."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import SyncResponse, sync
from zaia_cli.services.logs import validate_limit


@click.command("events")
@click.option("--service", help="Only events of this service (hostname)")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum number of events")
@click.pass_context
def events_command(ctx: click.Context, service: str | None, limit: int) -> SyncResponse:
    """Show recent processes, builds and deploys, newest first."""
    from zaia_cli.services.timeline import build_timeline

    creds = require_credentials(ctx)
    validate_limit(limit)
    client = platform_client(ctx, creds)

    return sync(build_timeline(client, creds.project_id, service_filter=service, limit=limit).to_dict())
