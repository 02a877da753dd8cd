"""Service lifecycle operations: start, stop, restart, scale and delete."""

from __future__ import annotations

from zaia_cli.errors import CONFIRM_REQUIRED, INVALID_SCALING, ZaiaError
from zaia_cli.output import OperationResult, process_to_output
from zaia_cli.ports import PlatformPort
from zaia_cli.services.resolve import resolve_service
from zaia_cli.types import AutoscalingParams

CPU_MODES = ("SHARED", "DEDICATED")

_LIFECYCLE_ACTIONS = {
    "start": "start_service",
    "stop": "stop_service",
    "restart": "restart_service",
}

_SCALING_BOUNDS = (
    ("minCpu", "maxCpu", "min_cpu", "max_cpu"),
    ("minRam", "maxRam", "min_ram", "max_ram"),
    ("minDisk", "maxDisk", "min_disk", "max_disk"),
    ("minReplicas", "maxReplicas", "min_replicas", "max_replicas"),
)


def run_lifecycle_action(client: PlatformPort, project_id: str, hostname: str, action: str) -> OperationResult:
    """Start, stop or restart a service by hostname."""
    service = resolve_service(hostname, client.list_services(project_id), project_id)
    process = getattr(client, _LIFECYCLE_ACTIONS[action])(service.id)
    return OperationResult(processes=[process_to_output(process, service.hostname, action)])


# ==============================================================================
# Scaling
# ==============================================================================


def validate_scaling(params: AutoscalingParams) -> AutoscalingParams:
    """Check scaling flags locally.

    Raises:
        ZaiaError: INVALID_SCALING when nothing was requested, the CPU mode is
            unknown, a value is negative or a minimum exceeds its maximum
    """
    if params.is_empty():
        raise ZaiaError(
            INVALID_SCALING,
            "At least one scaling parameter required",
            "Use --min-cpu, --max-cpu, --min-ram, --max-ram, --min-disk, --max-disk, "
            "--min-replicas, --max-replicas or --cpu-mode",
        )

    if params.cpu_mode is not None and params.cpu_mode not in CPU_MODES:
        raise ZaiaError(
            INVALID_SCALING,
            f"Invalid scaling parameters: cpuMode must be one of {', '.join(CPU_MODES)}",
            "Use --cpu-mode SHARED or --cpu-mode DEDICATED",
        )

    for min_name, max_name, min_attr, max_attr in _SCALING_BOUNDS:
        low, high = getattr(params, min_attr), getattr(params, max_attr)
        for name, value in ((min_name, low), (max_name, high)):
            if value is not None and value < 0:
                raise ZaiaError(INVALID_SCALING, f"Invalid scaling parameters: {name} must be >= 0")
        if low is not None and high is not None and low > high:
            raise ZaiaError(
                INVALID_SCALING,
                f"Invalid scaling parameters: {min_name} must be <= {max_name}",
                context={min_name: low, max_name: high},
            )

    return params


def scale_service(
    client: PlatformPort,
    project_id: str,
    hostname: str,
    params: AutoscalingParams,
) -> OperationResult:
    """Apply autoscaling; synchronous when the platform starts no process."""
    validate_scaling(params)
    service = resolve_service(hostname, client.list_services(project_id), project_id)

    process = client.set_autoscaling(service.id, params)
    if process is None:
        return OperationResult(
            data={
                "message": "Scaling parameters updated",
                "serviceHostname": service.hostname,
                "serviceId": service.id,
            }
        )
    return OperationResult(processes=[process_to_output(process, service.hostname, "scale")])


# ==============================================================================
# Deletion
# ==============================================================================


def require_confirmation(hostname: str, confirmed: bool) -> None:
    if not confirmed:
        raise ZaiaError(
            CONFIRM_REQUIRED,
            f"Deleting service '{hostname}' requires confirmation",
            f"Run: zaia delete --service {hostname} --confirm",
            {"wouldDelete": {"type": "service", "hostname": hostname}},
        )


def delete_service(client: PlatformPort, project_id: str, hostname: str, confirmed: bool) -> OperationResult:
    """Delete a service. Requires explicit confirmation."""
    require_confirmation(hostname, confirmed)
    service = resolve_service(hostname, client.list_services(project_id), project_id)
    process = client.delete_service(service.id)
    return OperationResult(processes=[process_to_output(process, service.hostname, "delete")])
