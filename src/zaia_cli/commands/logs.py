"""Logs command - Show service logs."""

from __future__ import annotations

import click

from zaia_cli.commands.common import get_log_fetcher, platform_client, require_credentials
from zaia_cli.output import SyncResponse, sync
from zaia_cli.services.logs import SEVERITIES, get_logs, validate_limit
from zaia_cli.services.resolve import require_service_flag
from zaia_cli.utils import parse_since


@click.command("logs")
@click.option("--service", help="Service hostname")
@click.option(
    "--severity",
    type=click.Choice(SEVERITIES, case_sensitive=False),
    default="all",
    show_default=True,
    help="Minimum severity",
)
@click.option("--since", default="1h", show_default=True, help="Time window: 30m, 1h, 7d or RFC3339")
@click.option("--limit", type=int, default=100, show_default=True, help="Maximum number of entries")
@click.option("--search", default="", help="Full-text filter")
@click.pass_context
def logs_command(
    ctx: click.Context,
    service: str | None,
    severity: str,
    since: str,
    limit: int,
    search: str,
) -> SyncResponse:
    """Show logs for a service."""
    creds = require_credentials(ctx)
    hostname = require_service_flag(service, "logs")
    since_time = parse_since(since)
    validate_limit(limit)

    client = platform_client(ctx, creds)
    result = get_logs(
        client,
        get_log_fetcher(ctx),
        creds.project_id,
        hostname,
        since=since_time,
        limit=limit,
        severity=severity.lower(),
        search=search,
    )
    return sync(result.to_dict())
