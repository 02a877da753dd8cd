"""Subdomain commands - Toggle public subdomain access."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.errors import INVALID_USAGE, ZaiaError
from zaia_cli.output import Response
from zaia_cli.services.resolve import require_service_flag
from zaia_cli.services.subdomain import DISABLE, ENABLE, toggle_subdomain


@click.group("subdomain", invoke_without_command=True)
@click.pass_context
def subdomain_group(ctx: click.Context) -> None:
    """Manage subdomain access of a service."""
    if ctx.invoked_subcommand is None:
        raise ZaiaError(
            INVALID_USAGE,
            "Missing subdomain subcommand",
            "Run: zaia subdomain enable|disable --service <hostname>",
            {"availableCommands": sorted(subdomain_group.commands)},
        )


def _toggle(ctx: click.Context, service: str | None, action: str) -> Response:
    creds = require_credentials(ctx)
    hostname = require_service_flag(service, f"subdomain {action}")
    client = platform_client(ctx, creds)

    return toggle_subdomain(client, creds.project_id, hostname, action).to_response()


@subdomain_group.command("enable")
@click.option("--service", help="Service hostname")
@click.pass_context
def subdomain_enable(ctx: click.Context, service: str | None) -> Response:
    """Enable subdomain access."""
    return _toggle(ctx, service, ENABLE)


@subdomain_group.command("disable")
@click.option("--service", help="Service hostname")
@click.pass_context
def subdomain_disable(ctx: click.Context, service: str | None) -> Response:
    """Disable subdomain access."""
    return _toggle(ctx, service, DISABLE)
