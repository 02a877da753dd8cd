"""Process commands - Inspect and cancel platform processes."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import SyncResponse, sync


@click.command("process")
@click.argument("process_id")
@click.pass_context
def process_command(ctx: click.Context, process_id: str) -> SyncResponse:
    """Show the status of a process."""
    from zaia_cli.services.process import get_process

    creds = require_credentials(ctx)
    client = platform_client(ctx, creds)

    return sync(get_process(client, process_id).to_dict())


@click.command("cancel")
@click.argument("process_id")
@click.pass_context
def cancel_command(ctx: click.Context, process_id: str) -> SyncResponse:
    """Cancel a running process."""
    from zaia_cli.services.process import cancel_process

    creds = require_credentials(ctx)
    client = platform_client(ctx, creds)

    return sync(cancel_process(client, process_id))
