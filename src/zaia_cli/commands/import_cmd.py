"""Import command - Create services from import YAML."""

from __future__ import annotations

import click

from zaia_cli.commands.common import platform_client, require_credentials
from zaia_cli.output import Response, sync
from zaia_cli.services.imports import import_services, preview_import, read_yaml_source, reject_project_section


@click.command("import")
@click.option("--file", "file_path", help="Path to YAML file")
@click.option("--content", help="Inline YAML content")
@click.option("--dry-run", is_flag=True, help="Validate and preview without executing")
@click.pass_context
def import_command(ctx: click.Context, file_path: str | None, content: str | None, dry_run: bool) -> Response:
    """Import services into the current project."""
    creds = require_credentials(ctx)
    yaml_content, _ = read_yaml_source(file_path, content)
    reject_project_section(yaml_content, creds.project_id)

    if dry_run:
        return sync(preview_import(yaml_content))

    client = platform_client(ctx, creds)
    return import_services(client, creds.project_id, yaml_content).to_response()
