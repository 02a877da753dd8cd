"""Environment variable services for project and service scopes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from zaia_cli.errors import API_ERROR, SERVICE_REQUIRED, ZaiaError
from zaia_cli.output import OperationResult, ProcessOutput, process_to_output
from zaia_cli.ports import PlatformPort
from zaia_cli.services.resolve import resolve_service
from zaia_cli.types import EnvVar, Process, ServiceStack

SCOPE_SERVICE = "service"
SCOPE_PROJECT = "project"

ENV_SET_ACTION = "envSet"
ENV_DELETE_ACTION = "envDelete"


@dataclass
class EnvScope:
    """Where variables live: one service, or the whole project."""

    project_id: str
    service: ServiceStack | None = None

    @property
    def name(self) -> str:
        return SCOPE_SERVICE if self.service else SCOPE_PROJECT


def require_scope(hostname: str | None, project: bool, command: str) -> None:
    if not hostname and not project:
        raise ZaiaError(
            SERVICE_REQUIRED,
            "Either --service or --project is required",
            f"Run: zaia env {command} --service <hostname> or zaia env {command} --project",
        )


def resolve_scope(client: PlatformPort, project_id: str, hostname: str | None) -> EnvScope:
    if not hostname:
        return EnvScope(project_id=project_id)
    service = resolve_service(hostname, client.list_services(project_id), project_id)
    return EnvScope(project_id=project_id, service=service)


def _fetch(client: PlatformPort, scope: EnvScope) -> list[EnvVar]:
    if scope.service:
        return client.get_service_env(scope.service.id)
    return client.get_project_env(scope.project_id)


def _outputs(processes: list[Process | None], scope: EnvScope, action: str) -> list[ProcessOutput]:
    hostname = scope.service.hostname if scope.service else ""
    return [process_to_output(p, hostname, action) for p in processes if p is not None]


def get_env(client: PlatformPort, scope: EnvScope) -> dict[str, Any]:
    data: dict[str, Any] = {"scope": scope.name}
    if scope.service:
        data["serviceHostname"] = scope.service.hostname
    data["vars"] = [{"key": v.key, "value": v.content} for v in _fetch(client, scope)]
    return data


def set_env(client: PlatformPort, scope: EnvScope, pairs: list[tuple[str, str]]) -> OperationResult:
    """Write variables.

    A service receives all pairs as one env file; a project gets one
    create call per pair.
    """
    keys = [k for k, _ in pairs]

    if scope.service:
        content = "".join(f"{k}={v}\n" for k, v in pairs)
        processes = [client.set_service_env_file(scope.service.id, content)]
    else:
        processes = [client.create_project_env(scope.project_id, k, v) for k, v in pairs]

    return OperationResult(
        processes=_outputs(processes, scope, ENV_SET_ACTION),
        data={"scope": scope.name, "message": "Environment variables set", "keys": keys},
    )


def delete_env(client: PlatformPort, scope: EnvScope, keys: list[str]) -> OperationResult:
    """Delete variables by key, resolving each key to its id first.

    Raises:
        ZaiaError: API_ERROR when a key does not exist in the scope
    """
    current = _fetch(client, scope)
    by_key = {v.key: v for v in current}

    missing = [k for k in keys if k not in by_key]
    if missing:
        available = [v.key for v in current]
        raise ZaiaError(
            API_ERROR,
            f"{scope.name.capitalize()} env var '{missing[0]}' not found",
            "Available vars: " + (", ".join(available) or "none"),
            {"missingKeys": missing, "availableKeys": available},
        )

    if scope.service:
        processes = [client.delete_user_data(by_key[k].id) for k in keys]
    else:
        processes = [client.delete_project_env(by_key[k].id) for k in keys]

    return OperationResult(
        processes=_outputs(processes, scope, ENV_DELETE_ACTION),
        data={"scope": scope.name, "message": "Environment variables deleted", "keys": keys},
    )
