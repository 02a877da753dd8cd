"""Shared plumbing for commands: settings, credentials and clients from the context."""

from __future__ import annotations

from typing import Callable

import click

from zaia_cli.auth import Credentials, CredentialStore, resolve_credentials
from zaia_cli.client import HTTPLogFetcher, ZeropsClient
from zaia_cli.config import CLISettings
from zaia_cli.ports import LogFetcher, PlatformPort

ClientFactory = Callable[[str, str, float], PlatformPort]


def default_client_factory(token: str, api_host: str, timeout: float) -> PlatformPort:
    return ZeropsClient(token=token, api_host=api_host, timeout=timeout)


def populate_context(obj: dict, settings: CLISettings) -> None:
    """Fill in production defaults for anything a caller did not inject."""
    obj.setdefault("settings", settings)
    obj.setdefault("store", CredentialStore(obj["settings"].resolve_data_file_path()))
    obj.setdefault("client_factory", default_client_factory)
    obj.setdefault("log_fetcher", HTTPLogFetcher(timeout=obj["settings"].api_timeout))


def get_settings(ctx: click.Context) -> CLISettings:
    return ctx.obj["settings"]


def get_store(ctx: click.Context) -> CredentialStore:
    return ctx.obj["store"]


def get_log_fetcher(ctx: click.Context) -> LogFetcher:
    return ctx.obj["log_fetcher"]


def require_credentials(ctx: click.Context) -> Credentials:
    """Resolve stored credentials or fail with AUTH_REQUIRED."""
    return resolve_credentials(get_store(ctx))


def make_client(ctx: click.Context, token: str, api_host: str) -> PlatformPort:
    """Build a platform client for an explicit token (used by login)."""
    if ctx.obj.get("client") is not None:
        return ctx.obj["client"]
    factory: ClientFactory = ctx.obj["client_factory"]
    return factory(token, api_host, get_settings(ctx).api_timeout)


def platform_client(ctx: click.Context, credentials: Credentials) -> PlatformPort:
    """The platform client for this invocation, built once from the credentials."""
    if ctx.obj.get("client") is None:
        ctx.obj["client"] = make_client(ctx, credentials.token, credentials.api_host)
    return ctx.obj["client"]
