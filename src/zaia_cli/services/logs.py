"""Logs-related services.

Log retrieval is two-step: the platform issues a short-lived access handle,
then the entries are read from the separate log backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from zaia_cli.errors import INVALID_PARAMETER, ZaiaError
from zaia_cli.ports import LogFetcher, PlatformPort
from zaia_cli.services.resolve import resolve_service
from zaia_cli.types import LogEntry, LogFetchParams

SEVERITIES = ("all", "error", "warning", "info", "debug")


@dataclass
class LogsResult:
    """Result of logs retrieval."""

    entries: list[LogEntry]
    limit: int

    @property
    def has_more(self) -> bool:
        return len(self.entries) >= self.limit

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [
                e.model_dump(include={"timestamp", "severity", "message", "container"}, exclude_none=True)
                for e in self.entries
            ],
            "hasMore": self.has_more,
        }


def validate_limit(limit: int) -> int:
    if limit < 1:
        raise ZaiaError(INVALID_PARAMETER, f"Invalid --limit value: {limit}", "Use a positive number")
    return limit


def get_logs(
    client: PlatformPort,
    fetcher: LogFetcher,
    project_id: str,
    hostname: str,
    since: datetime,
    limit: int = 100,
    severity: str = "all",
    search: str = "",
) -> LogsResult:
    """Get log entries for one service.

    Args:
        client: Platform client
        fetcher: Log backend reader
        project_id: Project the service belongs to
        hostname: Service hostname
        since: Oldest entry to include
        limit: Maximum number of entries
        severity: Severity filter, "all" for no filter
        search: Optional full-text filter

    Returns:
        LogsResult with entries in chronological order
    """
    service = resolve_service(hostname, client.list_services(project_id), project_id)
    access = client.get_project_log(project_id)

    entries = fetcher.fetch_logs(
        access,
        LogFetchParams(
            service_id=service.id,
            severity=severity,
            since=since,
            limit=limit,
            search=search,
        ),
    )
    return LogsResult(entries=entries, limit=limit)
