"""Hostname resolution.

Maps user-facing hostnames onto platform service ids using a service list
the caller already fetched.
"""

from __future__ import annotations

from typing import Sequence

from zaia_cli.errors import SERVICE_NOT_FOUND, SERVICE_REQUIRED, ZaiaError
from zaia_cli.types import ServiceStack


class ServiceNotFoundError(ZaiaError):
    """Raised when no service in the project has the requested hostname."""

    def __init__(self, hostname: str, available: list[str], project_id: str = ""):
        self.hostname = hostname
        self.available = available
        context: dict = {"requestedService": hostname, "availableHostnames": available}
        if project_id:
            context["projectId"] = project_id
        super().__init__(
            SERVICE_NOT_FOUND,
            f"Service '{hostname}' not found",
            "Available services: " + (", ".join(available) or "none"),
            context,
        )


def hostnames(services: Sequence[ServiceStack]) -> list[str]:
    return [s.hostname for s in services]


def resolve_service(hostname: str, services: Sequence[ServiceStack], project_id: str = "") -> ServiceStack:
    """Find a service by exact, case-sensitive hostname."""
    for service in services:
        if service.hostname == hostname:
            return service
    raise ServiceNotFoundError(hostname, hostnames(services), project_id)


def require_service_flag(hostname: str | None, command: str) -> str:
    """Reject a missing ``--service`` before anything else happens."""
    if not hostname:
        raise ZaiaError(
            SERVICE_REQUIRED,
            "Service hostname is required",
            f"Run: zaia {command} --service <hostname>",
        )
    return hostname
