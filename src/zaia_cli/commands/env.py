"""Env commands - Read and write environment variables."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.errors import INVALID_PARAMETER, INVALID_USAGE, ZaiaError
from zaia_cli.output import Response, SyncResponse, sync
from zaia_cli.services.env import delete_env, get_env, require_scope, resolve_scope, set_env
from zaia_cli.utils import parse_env_pairs


def scope_options(func):
    func = click.option("--project", is_flag=True, help="Use project-level variables")(func)
    func = click.option("--service", help="Service hostname")(func)
    return func


@click.group("env", invoke_without_command=True)
@click.pass_context
def env_group(ctx: click.Context) -> None:
    """Manage environment variables."""
    if ctx.invoked_subcommand is None:
        raise ZaiaError(
            INVALID_USAGE,
            "Missing env subcommand",
            "Run: zaia env get|set|delete --help",
            {"availableCommands": sorted(env_group.commands)},
        )


@env_group.command("get")
@scope_options
@click.pass_context
def env_get(ctx: click.Context, service: str | None, project: bool) -> SyncResponse:
    """List variables of a service or the project."""
    creds = require_credentials(ctx)
    require_scope(service, project, "get")
    client = platform_client(ctx, creds)

    scope = resolve_scope(client, creds.project_id, service)
    return sync(get_env(client, scope))


@env_group.command("set")
@scope_options
@click.argument("pairs", nargs=-1)
@click.pass_context
def env_set(ctx: click.Context, service: str | None, project: bool, pairs: tuple[str, ...]) -> Response:
    """Set variables given as KEY=value."""
    creds = require_credentials(ctx)
    require_scope(service, project, "set")
    if not pairs:
        raise ZaiaError(
            INVALID_PARAMETER,
            "At least one KEY=value pair is required",
            "Run: zaia env set --service <hostname> KEY=value",
        )
    parsed = parse_env_pairs(pairs)
    client = platform_client(ctx, creds)

    scope = resolve_scope(client, creds.project_id, service)
    return set_env(client, scope, parsed).to_response()


@env_group.command("delete")
@scope_options
@click.argument("keys", nargs=-1)
@click.pass_context
def env_delete(ctx: click.Context, service: str | None, project: bool, keys: tuple[str, ...]) -> Response:
    """Delete variables by key."""
    creds = require_credentials(ctx)
    require_scope(service, project, "delete")
    if not keys:
        raise ZaiaError(
            INVALID_PARAMETER,
            "At least one KEY is required",
            "Run: zaia env delete --service <hostname> KEY",
        )
    client = platform_client(ctx, creds)

    scope = resolve_scope(client, creds.project_id, service)
    return delete_env(client, scope, list(keys)).to_response()
