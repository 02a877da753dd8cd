"""CLI commands for ZAIA."""

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

__all__ = [
    "status_command",
    "discover_command",
    "process_command",
    "cancel_command",
    "start_command",
    "stop_command",
    "restart_command",
    "scale_command",
    "env_group",
    "import_command",
    "delete_command",
    "subdomain_group",
    "logs_command",
    "events_command",
    "validate_command",
]
