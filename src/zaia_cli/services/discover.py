"""Project and service discovery."""

from __future__ import annotations

from typing import Any

from zaia_cli.ports import PlatformPort
from zaia_cli.services.resolve import resolve_service
from zaia_cli.types import ServiceStack


def _envs(client: PlatformPort, service: ServiceStack) -> list[dict[str, str]]:
    return [{"key": e.key, "value": e.content} for e in client.get_service_env(service.id)]


def service_summary(service: ServiceStack) -> dict[str, Any]:
    return {
        "hostname": service.hostname,
        "serviceId": service.id,
        "type": service.type_version,
        "status": service.status,
    }


def service_detail(service: ServiceStack) -> dict[str, Any]:
    detail = service_summary(service)
    detail["created"] = service.created

    scaling = service.custom_autoscaling
    if scaling is not None:
        detail["containers"] = {"min": scaling.horizontal_min_count, "max": scaling.horizontal_max_count}
        detail["resources"] = {
            "cpuMode": scaling.cpu_mode,
            "cpu": {"min": scaling.min_cpu, "max": scaling.max_cpu},
            "ram": {"min": scaling.min_ram, "max": scaling.max_ram},
            "disk": {"min": scaling.min_disk, "max": scaling.max_disk},
        }

    if service.ports:
        detail["ports"] = [{"port": p.port, "protocol": p.protocol, "public": p.public} for p in service.ports]

    return detail


def discover(
    client: PlatformPort,
    project_id: str,
    hostname: str | None = None,
    include_envs: bool = False,
) -> dict[str, Any]:
    """Describe the project and its services, or one service in detail."""
    project = client.get_project(project_id)
    services = client.list_services(project_id)

    if hostname:
        service = resolve_service(hostname, services, project_id)
        entries = [service_detail(service)]
        selected = [service]
    else:
        entries = [service_summary(s) for s in services]
        selected = services

    if include_envs:
        for entry, service in zip(entries, selected):
            entry["envs"] = _envs(client, service)

    return {
        "project": {"id": project.id, "name": project.name, "status": project.status},
        "services": entries,
    }
