"""Lifecycle commands - Start, stop, restart and scale services."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import Response
from zaia_cli.services.lifecycle import CPU_MODES, run_lifecycle_action, scale_service, validate_scaling
from zaia_cli.services.resolve import require_service_flag
from zaia_cli.types import AutoscalingParams


def _lifecycle_command(action: str, help_text: str) -> click.Command:
    @click.command(action, help=help_text)
    @click.option("--service", help="Service hostname")
    @click.pass_context
    def command(ctx: click.Context, service: str | None) -> Response:
        creds = require_credentials(ctx)
        hostname = require_service_flag(service, action)
        client = platform_client(ctx, creds)

        return run_lifecycle_action(client, creds.project_id, hostname, action).to_response()

    return command


start_command = _lifecycle_command("start", "Start a service.")
stop_command = _lifecycle_command("stop", "Stop a service.")
restart_command = _lifecycle_command("restart", "Restart a service.")


@click.command("scale")
@click.option("--service", help="Service hostname")
@click.option("--cpu-mode", type=click.Choice(CPU_MODES, case_sensitive=False), help="CPU mode")
@click.option("--min-cpu", type=int, help="Minimum CPU cores")
@click.option("--max-cpu", type=int, help="Maximum CPU cores")
@click.option("--min-ram", type=float, help="Minimum RAM in GB")
@click.option("--max-ram", type=float, help="Maximum RAM in GB")
@click.option("--min-disk", type=float, help="Minimum disk in GB")
@click.option("--max-disk", type=float, help="Maximum disk in GB")
@click.option("--min-replicas", type=int, help="Minimum container count")
@click.option("--max-replicas", type=int, help="Maximum container count")
@click.pass_context
def scale_command(
    ctx: click.Context,
    service: str | None,
    cpu_mode: str | None,
    **bounds: int | float | None,
) -> Response:
    """Change the autoscaling parameters of a service."""
    creds = require_credentials(ctx)
    hostname = require_service_flag(service, "scale")

    params = validate_scaling(
        AutoscalingParams(cpu_mode=cpu_mode.upper() if cpu_mode else None, **bounds),
    )
    client = platform_client(ctx, creds)

    return scale_service(client, creds.project_id, hostname, params).to_response()
