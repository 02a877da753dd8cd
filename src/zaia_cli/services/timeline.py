"""Activity timeline built from process history and app version history.

The three reads run concurrently; the first failure fails the whole build.
"""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from loguru import logger as log

from zaia_cli.output import map_status
from zaia_cli.ports import PlatformPort
from zaia_cli.types import AppVersionEvent, ProcessEvent, ServiceStack, ZaiaModel
from zaia_cli.utils import format_duration, parse_timestamp

EVENT_PROCESS = "process"
EVENT_BUILD = "build"
EVENT_DEPLOY = "deploy"

ACTION_NAMES = {
    "serviceStackStart": "start",
    "serviceStackStop": "stop",
    "serviceStackRestart": "restart",
    "serviceStackAutoscaling": "scale",
    "serviceStackImport": "import",
    "serviceStackDelete": "delete",
    "serviceStackUserDataFile": "env-update",
    "serviceStackEnableSubdomainAccess": "subdomain-enable",
    "serviceStackDisableSubdomainAccess": "subdomain-disable",
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class TimelineEvent(ZaiaModel):
    timestamp: str
    type: str
    action: str
    status: str
    service: str = ""
    service_type: str | None = None
    detail: str | None = None
    duration: str | None = None
    user: str | None = None
    process_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class ServiceInfo:
    hostname: str
    type: str


@dataclass
class Timeline:
    project_id: str
    events: list[TimelineEvent]

    def to_dict(self) -> dict[str, Any]:
        processes = sum(1 for e in self.events if e.type == EVENT_PROCESS)
        return {
            "projectId": self.project_id,
            "events": [e.to_dict() for e in self.events],
            "summary": {
                "total": len(self.events),
                "processes": processes,
                "deploys": len(self.events) - processes,
            },
        }


def map_action(action_name: str) -> str:
    """Public verb for a platform action name. Unknown names pass through."""
    return ACTION_NAMES.get(action_name, action_name)


def process_event(event: ProcessEvent, services: dict[str, ServiceInfo]) -> TimelineEvent:
    hostname = ""
    service_type = None
    if event.service_stacks:
        ref = event.service_stacks[0]
        info = services.get(ref.id)
        hostname = info.hostname if info else ref.name
        service_type = info.type if info else None

    action = map_action(event.action_name)
    return TimelineEvent(
        timestamp=event.created,
        type=EVENT_PROCESS,
        action=action,
        status=map_status(event.status),
        service=hostname,
        service_type=service_type or None,
        detail=f"{action[:1].upper()}{action[1:]} {hostname}".strip(),
        duration=format_duration(event.started, event.finished) or None,
        user=event.created_by_email or "system",
        process_id=event.id,
    )


def app_version_event(version: AppVersionEvent, services: dict[str, ServiceInfo]) -> TimelineEvent:
    info = services.get(version.service_stack_id)
    build = version.build

    if build is not None and build.pipeline_start:
        kind = EVENT_BUILD
        detail = f"Build v{version.sequence} from {version.source}" if version.source else f"Build v{version.sequence}"
        duration = format_duration(build.pipeline_start, build.pipeline_finish or build.pipeline_failed)
    else:
        kind = EVENT_DEPLOY
        detail = f"Deploy v{version.sequence}"
        duration = ""

    return TimelineEvent(
        timestamp=version.created,
        type=kind,
        action=kind,
        status=version.status,
        service=info.hostname if info else "",
        service_type=info.type if info else None,
        detail=detail,
        duration=duration or None,
    )


def merge_events(
    processes: list[ProcessEvent],
    versions: list[AppVersionEvent],
    services: list[ServiceStack],
    service_filter: str | None = None,
    limit: int = 50,
) -> list[TimelineEvent]:
    """Merge both histories, filter by hostname, newest first, then truncate."""
    lookup = {s.id: ServiceInfo(hostname=s.hostname, type=s.type_version) for s in services}

    events = [process_event(p, lookup) for p in processes]
    events.extend(app_version_event(v, lookup) for v in versions)

    if service_filter:
        events = [e for e in events if e.service == service_filter]

    events.sort(key=lambda e: parse_timestamp(e.timestamp) or _OLDEST, reverse=True)
    return events[: max(limit, 0)]


def build_timeline(
    client: PlatformPort,
    project_id: str,
    service_filter: str | None = None,
    limit: int = 50,
) -> Timeline:
    """Fetch process history, app versions and services in parallel and merge them."""
    log.debug(f"Fetching timeline for project {project_id} (limit={limit})")

    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="zaia-timeline") as pool:
        futures = {
            "processes": pool.submit(client.search_processes, project_id, limit),
            "versions": pool.submit(client.search_app_versions, project_id, limit),
            "services": pool.submit(client.list_services, project_id),
        }
        done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)
        for future in done:
            if future.exception() is not None:
                for other in pending:
                    other.cancel()
                raise future.exception()

        results = {name: future.result() for name, future in futures.items()}

    events = merge_events(
        results["processes"],
        results["versions"],
        results["services"],
        service_filter=service_filter,
        limit=limit,
    )
    return Timeline(project_id=project_id, events=events)
