"""Subdomain access toggling with idempotent no-op absorption."""

from __future__ import annotations

from zaia_cli.errors import API_ERROR, SUBDOMAIN_ALREADY_DISABLED, SUBDOMAIN_ALREADY_ENABLED, PlatformError, ZaiaError
from zaia_cli.output import OperationResult, process_to_output
from zaia_cli.ports import PlatformPort
from zaia_cli.services.resolve import resolve_service

ENABLE = "enable"
DISABLE = "disable"

_STRUCTURED_CODES = {
    ENABLE: SUBDOMAIN_ALREADY_ENABLED,
    DISABLE: SUBDOMAIN_ALREADY_DISABLED,
}

# Message spellings that mean "already in that state" when the platform sends
# no structured code. Compared case-insensitively as substrings.
ALREADY_IN_STATE_SPELLINGS = {
    ENABLE: ("already enabled", "subdomainaccessalreadyenabled", "alreadyenabled"),
    DISABLE: ("already disabled", "subdomainaccessalreadydisabled", "alreadydisabled"),
}

_ACTION_NAMES = {
    ENABLE: "enableSubdomain",
    DISABLE: "disableSubdomain",
}


def is_already_in_state(err: PlatformError, action: str) -> bool:
    """Whether a failed toggle only means the subdomain was already enabled/disabled."""
    if err.code == _STRUCTURED_CODES[action]:
        return True
    message = err.message.lower()
    return any(spelling in message for spelling in ALREADY_IN_STATE_SPELLINGS[action])


def toggle_subdomain(client: PlatformPort, project_id: str, hostname: str, action: str) -> OperationResult:
    """Enable or disable subdomain access.

    An "already in that state" failure becomes a synchronous success; any
    other platform failure is reported as API_ERROR with its message.
    """
    service = resolve_service(hostname, client.list_services(project_id), project_id)
    call = client.enable_subdomain_access if action == ENABLE else client.disable_subdomain_access

    try:
        process = call(service.id)
    except PlatformError as e:
        if not is_already_in_state(e, action):
            raise ZaiaError(API_ERROR, e.message, e.suggestion, e.context) from e
        return OperationResult(
            data={
                "serviceHostname": service.hostname,
                "serviceId": service.id,
                "action": action,
                "status": f"already_{action}d",
            }
        )

    output = process_to_output(process, service.hostname)
    return OperationResult(processes=[output.model_copy(update={"action_name": _ACTION_NAMES[action]})])
