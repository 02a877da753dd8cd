"""Service layer for the ZAIA CLI.

The services hold the business logic behind each command. They:
1. Take the platform client explicitly (no hidden globals)
2. Return structured data or an ``OperationResult``
3. Raise ``ZaiaError`` for every failure (the CLI renders it)

Architecture:
    CLI Command → Service → PlatformPort (ZeropsClient) → Zerops API
"""

from zaia_cli.services.discover import discover
from zaia_cli.services.env import EnvScope, delete_env, get_env, require_scope, resolve_scope, set_env
from zaia_cli.services.imports import import_services, preview_import, read_yaml_source, reject_project_section
from zaia_cli.services.lifecycle import (
    delete_service,
    require_confirmation,
    run_lifecycle_action,
    scale_service,
    validate_scaling,
)
from zaia_cli.services.logs import LogsResult, get_logs, validate_limit
from zaia_cli.services.process import cancel_process, get_process
from zaia_cli.services.resolve import ServiceNotFoundError, require_service_flag, resolve_service
from zaia_cli.services.subdomain import is_already_in_state, toggle_subdomain
from zaia_cli.services.timeline import Timeline, TimelineEvent, build_timeline
from zaia_cli.services.validate import validate_yaml

__all__ = [
    # Discovery
    "discover",
    # Environment variables
    "EnvScope",
    "delete_env",
    "get_env",
    "require_scope",
    "resolve_scope",
    "set_env",
    # Import
    "import_services",
    "preview_import",
    "read_yaml_source",
    "reject_project_section",
    # Lifecycle
    "delete_service",
    "require_confirmation",
    "run_lifecycle_action",
    "scale_service",
    "validate_scaling",
    # Logs
    "LogsResult",
    "get_logs",
    "validate_limit",
    # Processes
    "cancel_process",
    "get_process",
    # Resolution
    "ServiceNotFoundError",
    "require_service_flag",
    "resolve_service",
    # Subdomain
    "is_already_in_state",
    "toggle_subdomain",
    # Timeline
    "Timeline",
    "TimelineEvent",
    "build_timeline",
    # Validation
    "validate_yaml",
]
