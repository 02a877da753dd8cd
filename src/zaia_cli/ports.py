"""Capability interfaces for the platform and the log backend.

``ZeropsClient`` and ``HTTPLogFetcher`` in ``zaia_cli.client`` are the
production implementations. Every method raises ``PlatformError`` on failure.
"""

from __future__ import annotations

from typing import Protocol

from zaia_cli.types import (
    AppVersionEvent,
    AutoscalingParams,
    EnvVar,
    ImportResult,
    LogAccess,
    LogEntry,
    LogFetchParams,
    Process,
    ProcessEvent,
    Project,
    ServiceStack,
    UserInfo,
)


class PlatformPort(Protocol):
    # Identity
    def get_user_info(self) -> UserInfo: ...

    def list_projects(self) -> list[Project]: ...

    def get_project(self, project_id: str) -> Project: ...

    # Services
    def list_services(self, project_id: str) -> list[ServiceStack]: ...

    def get_service(self, service_id: str) -> ServiceStack: ...

    def start_service(self, service_id: str) -> Process: ...

    def stop_service(self, service_id: str) -> Process: ...

    def restart_service(self, service_id: str) -> Process: ...

    def set_autoscaling(self, service_id: str, params: AutoscalingParams) -> Process | None: ...

    def delete_service(self, service_id: str) -> Process: ...

    # Environment variables
    def get_service_env(self, service_id: str) -> list[EnvVar]: ...

    def set_service_env_file(self, service_id: str, content: str) -> Process: ...

    def delete_user_data(self, user_data_id: str) -> Process: ...

    def get_project_env(self, project_id: str) -> list[EnvVar]: ...

    def create_project_env(self, project_id: str, key: str, content: str) -> Process | None: ...

    def delete_project_env(self, env_id: str) -> Process | None: ...

    # Import
    def import_services(self, project_id: str, yaml: str) -> ImportResult: ...

    # Processes
    def get_process(self, process_id: str) -> Process: ...

    def cancel_process(self, process_id: str) -> Process: ...

    # Subdomain
    def enable_subdomain_access(self, service_id: str) -> Process: ...

    def disable_subdomain_access(self, service_id: str) -> Process: ...

    # Logs and history
    def get_project_log(self, project_id: str) -> LogAccess: ...

    def search_processes(self, project_id: str, limit: int) -> list[ProcessEvent]: ...

    def search_app_versions(self, project_id: str, limit: int) -> list[AppVersionEvent]: ...


class LogFetcher(Protocol):
    def fetch_logs(self, access: LogAccess | None, params: LogFetchParams) -> list[LogEntry]: ...
