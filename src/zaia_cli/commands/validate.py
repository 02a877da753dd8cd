"""Validate command - Check zerops.yml and import.yml files."""

from __future__ import annotations

import click

from zaia_cli.output import SyncResponse, sync
from zaia_cli.services.validate import validate_yaml


@click.command("validate")
@click.option("--file", "file_path", help="File to validate (default: zerops.yml)")
@click.option("--content", help="Inline YAML content to validate")
@click.option("--type", "file_type", help="File type: zerops.yml or import.yml")
def validate_command(file_path: str | None, content: str | None, file_type: str | None) -> SyncResponse:
    """Validate YAML configuration."""
    return sync(validate_yaml(file=file_path, content=content, file_type=file_type))
