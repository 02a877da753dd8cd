"""ZAIA CLI - JSON-first command line for AI agents driving Zerops.

This is the main entry point for the ZAIA CLI. Every invocation writes exactly
one JSON envelope to stdout and exits with the matching exit code.
"""

from __future__ import annotations

import sys
from typing import Any

import click
from loguru import logger as log
from pydantic import ValidationError

from zaia_cli import __version__
from zaia_cli.auth import login as login_with_token
from zaia_cli.commands.common import get_settings, get_store, make_client, populate_context
from zaia_cli.config import load_settings
from zaia_cli.errors import API_ERROR, INVALID_PARAMETER, INVALID_USAGE, ZaiaError
from zaia_cli.output import Envelope, ErrorResponse, SyncResponse, sync
from zaia_cli.ui import configure_logging

# Import commands (at top level to satisfy E402)
from zaia_cli.commands.status import status_command
from zaia_cli.commands.discover import discover_command
from zaia_cli.commands.process import process_command, cancel_command
from zaia_cli.commands.manage import start_command, stop_command, restart_command, scale_command
from zaia_cli.commands.env import env_group
from zaia_cli.commands.import_cmd import import_command
from zaia_cli.commands.delete import delete_command
from zaia_cli.commands.subdomain import subdomain_group
from zaia_cli.commands.logs import logs_command
from zaia_cli.commands.events import events_command
from zaia_cli.commands.validate import validate_command


# ==============================================================================
# Envelope-Aware Group
# ==============================================================================


class ZaiaGroup(click.Group):
    """Root group that turns every outcome into exactly one envelope.

    Commands return a response or raise ``ZaiaError``. Usage errors from click
    become INVALID_USAGE. Only ``--help`` prints plain text.
    """

    def main(
        self,
        args: Any = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        obj = dict(extra.pop("obj", None) or {})
        envelope = obj.get("envelope") or Envelope(sys.stdout)
        obj["envelope"] = envelope

        try:
            response = super().main(
                args,
                prog_name=prog_name or "zaia",
                complete_var=complete_var,
                standalone_mode=False,
                obj=obj,
                **extra,
            )
        except ZaiaError as e:
            response = ErrorResponse.from_error(e)
        except click.ClickException as e:
            response = ErrorResponse(code=INVALID_USAGE, error=e.format_message(), suggestion="Run: zaia --help")
        except click.Abort:
            response = ErrorResponse(code=API_ERROR, error="Aborted")
        except Exception as e:
            log.opt(exception=e).debug("Unhandled error")
            response = ErrorResponse(code=API_ERROR, error=str(e) or type(e).__name__)

        # --help and similar exits return a plain exit code
        if isinstance(response, int):
            sys.exit(response)

        if response is None:
            response = sync()
        sys.exit(envelope.emit(response))


# ==============================================================================
# Main CLI Group
# ==============================================================================


@click.group(cls=ZaiaGroup, invoke_without_command=True)
@click.option(
    "--debug",
    is_flag=True,
    envvar="ZAIA_DEBUG",
    help="Enable debug output on stderr",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """ZAIA - AI agent CLI for Zerops.

    Every command prints one JSON object: sync, async or error.
    """
    ctx.ensure_object(dict)

    try:
        settings = ctx.obj.get("settings") or load_settings()
    except ValidationError as e:
        raise ZaiaError(INVALID_PARAMETER, f"Invalid configuration: {e}", "Check ZAIA_* environment variables") from e

    ctx.obj["debug"] = debug or settings.debug
    configure_logging(ctx.obj["debug"])
    populate_context(ctx.obj, settings)

    if ctx.invoked_subcommand is None:
        raise ZaiaError(
            INVALID_USAGE,
            "No command specified",
            "Run: zaia --help",
            {"availableCommands": sorted(cli.commands)},
        )


# ==============================================================================
# Authentication Commands
# ==============================================================================


@cli.command("login")
@click.argument("token")
@click.option("--url", "api_url", help="API host (default: api.app-prg1.zerops.io)")
@click.option("--region", help="Region name (default: prg1)")
@click.pass_context
def login(ctx: click.Context, token: str, api_url: str | None, region: str | None) -> SyncResponse:
    """Authenticate with a project-scoped Personal Access Token."""
    settings = get_settings(ctx)
    api_host = api_url or settings.default_api_host
    region = region or settings.default_region

    client = make_client(ctx, token, api_host)
    result = login_with_token(get_store(ctx), client, token, api_host, region)

    return sync(result.to_dict())


@cli.command("logout")
@click.pass_context
def logout(ctx: click.Context) -> SyncResponse:
    """Remove stored credentials."""
    get_store(ctx).clear()
    return sync({"message": "Logged out successfully"})


@cli.command("version")
def version() -> SyncResponse:
    """Show version information."""
    return sync({"version": __version__})


# ==============================================================================
# Register Commands
# ==============================================================================

cli.add_command(status_command)
cli.add_command(discover_command)
cli.add_command(process_command)
cli.add_command(cancel_command)
cli.add_command(start_command)
cli.add_command(stop_command)
cli.add_command(restart_command)
cli.add_command(scale_command)
cli.add_command(env_group)
cli.add_command(import_command)
cli.add_command(delete_command)
cli.add_command(subdomain_group)
cli.add_command(logs_command)
cli.add_command(events_command)
cli.add_command(validate_command)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
