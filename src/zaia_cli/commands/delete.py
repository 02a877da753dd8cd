"""Delete command - Delete a service."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import Response
from zaia_cli.services.lifecycle import delete_service, require_confirmation
from zaia_cli.services.resolve import require_service_flag


@click.command("delete")
@click.option("--service", help="Service hostname to delete")
@click.option("--confirm", is_flag=True, help="Confirm the deletion")
@click.pass_context
def delete_command(ctx: click.Context, service: str | None, confirm: bool) -> Response:
    """Delete a service and all its data."""
    creds = require_credentials(ctx)
    hostname = require_service_flag(service, "delete")
    require_confirmation(hostname, confirm)

    client = platform_client(ctx, creds)
    return delete_service(client, creds.project_id, hostname, confirm).to_response()
