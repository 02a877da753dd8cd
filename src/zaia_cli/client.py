"""API clients for the Zerops platform and its log backend."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

import requests
from loguru import logger as log

from zaia_cli import __version__
from zaia_cli.config import DEFAULT_API_TIMEOUT
from zaia_cli.errors import API_ERROR, PlatformError, map_api_error, map_transport_error
from zaia_cli.types import (
    AppVersionEvent,
    AutoscalingParams,
    CustomAutoscaling,
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

CLI_USER_AGENT = f"zaia/{__version__}"


@dataclass
class ZeropsClient:
    """Client for the Zerops public REST API.

    Every failure leaves this class as a classified ``PlatformError``; callers
    never see a raw ``requests`` exception.
    """

    token: str
    api_host: str
    timeout: float = DEFAULT_API_TIMEOUT
    session: requests.Session = field(default_factory=requests.Session)

    _client_id: str | None = field(default=None, init=False, repr=False)
    _client_id_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def api_base_url(self) -> str:
        host = self.api_host
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return f"{host.rstrip('/')}/api/rest/public"

    def _get_headers(self) -> dict[str, str]:
        """Generate headers with authentication."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "User-Agent": CLI_USER_AGENT,
        }

    def _mk_url(self, path: str) -> str:
        """Build platform API URL."""
        return f"{self.api_base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        entity: str = "service",
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or ``None``)."""
        try:
            response = self.session.request(
                method,
                self._mk_url(path),
                json=json,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            log.debug(f"{method} {path} failed: {e}")
            raise map_transport_error(e) from e

        log.debug(f"{method} {path} -> {response.status_code}")

        if not response.ok:
            api_code, api_message = _parse_error_body(response)
            raise map_api_error(response.status_code, api_code, api_message, entity=entity)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise PlatformError(API_ERROR, f"Invalid JSON from {path}: {e}") from e

    def _search(self, path: str, filters: list[dict[str, str]], limit: int | None = None) -> list[dict[str, Any]]:
        body: dict[str, Any] = {
            "search": [{"name": f["name"], "operator": "eq", "value": f["value"]} for f in filters],
            "sort": [{"name": "created", "ascending": False}] if limit is not None else [],
        }
        if limit is not None:
            body["limit"] = limit
        data = self._request("POST", path, json=body) or {}
        return data.get("items", [])

    def _client_filter(self) -> list[dict[str, str]]:
        return [{"name": "clientId", "value": self.get_client_id()}]

    # ==========================================================================
    # Identity
    # ==========================================================================

    def get_user_info(self) -> UserInfo:
        """Get the user owning the token. Caches the client id."""
        data = self._request("GET", "/user/info") or {}
        client_users = data.get("clientUserList") or []
        client_id = client_users[0].get("clientId", "") if client_users else ""

        with self._client_id_lock:
            if client_id and self._client_id is None:
                self._client_id = client_id

        return UserInfo(
            id=data.get("id", ""),
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            client_id=client_id,
        )

    def get_client_id(self) -> str:
        """Client id required by the search endpoints, fetched once."""
        with self._client_id_lock:
            if self._client_id is not None:
                return self._client_id

        info = self.get_user_info()
        if not info.client_id:
            raise PlatformError(API_ERROR, "Token user has no client", "Check your Personal Access Token")
        return info.client_id

    def list_projects(self) -> list[Project]:
        items = self._search("/project/search", self._client_filter())
        return [Project.model_validate(p) for p in items]

    def get_project(self, project_id: str) -> Project:
        return Project.model_validate(self._request("GET", f"/project/{project_id}", entity="project"))

    # ==========================================================================
    # Services
    # ==========================================================================

    def list_services(self, project_id: str) -> list[ServiceStack]:
        items = self._search("/service-stack/search", self._client_filter())
        return [_map_service(s) for s in items if s.get("projectId") == project_id]

    def get_service(self, service_id: str) -> ServiceStack:
        return _map_service(self._request("GET", f"/service-stack/{service_id}"))

    def start_service(self, service_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/service-stack/{service_id}/start"))

    def stop_service(self, service_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/service-stack/{service_id}/stop"))

    def restart_service(self, service_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/service-stack/{service_id}/restart"))

    def set_autoscaling(self, service_id: str, params: AutoscalingParams) -> Process | None:
        """Apply scaling. Returns ``None`` when the platform applied it immediately."""
        data = self._request(
            "PUT",
            f"/service-stack/{service_id}/autoscaling",
            json=_autoscaling_body(params),
        ) or {}
        process = data.get("process")
        return Process.model_validate(process) if process else None

    def delete_service(self, service_id: str) -> Process:
        return Process.model_validate(self._request("DELETE", f"/service-stack/{service_id}"))

    # ==========================================================================
    # Environment Variables
    # ==========================================================================

    def get_service_env(self, service_id: str) -> list[EnvVar]:
        data = self._request("GET", f"/service-stack/{service_id}/env") or {}
        return [EnvVar.model_validate(e) for e in data.get("items", [])]

    def set_service_env_file(self, service_id: str, content: str) -> Process:
        return Process.model_validate(
            self._request(
                "PUT",
                f"/service-stack/{service_id}/user-data-env-file",
                json={"envFile": content},
            )
        )

    def delete_user_data(self, user_data_id: str) -> Process:
        return Process.model_validate(self._request("DELETE", f"/user-data/{user_data_id}"))

    def get_project_env(self, project_id: str) -> list[EnvVar]:
        filters = [*self._client_filter(), {"name": "id", "value": project_id}]
        items = self._search("/project/search", filters)
        if not items:
            raise PlatformError(API_ERROR, f"Project '{project_id}' not found", "Run: zaia login <token>")
        return [EnvVar.model_validate(e) for e in items[0].get("envList") or []]

    def create_project_env(self, project_id: str, key: str, content: str) -> Process | None:
        data = self._request(
            "POST",
            f"/project/{project_id}/env",
            entity="project",
            json={"key": key, "content": content, "sensitive": False},
        )
        return Process.model_validate(data) if data else None

    def delete_project_env(self, env_id: str) -> Process | None:
        data = self._request("DELETE", f"/project-env/{env_id}", entity="project")
        return Process.model_validate(data) if data else None

    # ==========================================================================
    # Import
    # ==========================================================================

    def import_services(self, project_id: str, yaml: str) -> ImportResult:
        data = self._request("POST", f"/project/{project_id}/service-stack/import", json={"yaml": yaml})
        return ImportResult.model_validate(data or {})

    # ==========================================================================
    # Processes
    # ==========================================================================

    def get_process(self, process_id: str) -> Process:
        return Process.model_validate(self._request("GET", f"/process/{process_id}", entity="process"))

    def cancel_process(self, process_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/process/{process_id}/cancel", entity="process"))

    # ==========================================================================
    # Subdomain
    # ==========================================================================

    def enable_subdomain_access(self, service_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/service-stack/{service_id}/enable-subdomain-access"))

    def disable_subdomain_access(self, service_id: str) -> Process:
        return Process.model_validate(self._request("PUT", f"/service-stack/{service_id}/disable-subdomain-access"))

    # ==========================================================================
    # Logs and History
    # ==========================================================================

    def get_project_log(self, project_id: str) -> LogAccess:
        data = self._request("GET", f"/project/{project_id}/log", entity="project") or {}
        return LogAccess(
            url=normalize_log_url(data.get("url", "")),
            access_token=data.get("accessToken", ""),
            expiration=data.get("expiration", ""),
        )

    def search_processes(self, project_id: str, limit: int) -> list[ProcessEvent]:
        filters = [*self._client_filter(), {"name": "projectId", "value": project_id}]
        return [_map_process_event(p) for p in self._search("/process/search", filters, limit=limit)]

    def search_app_versions(self, project_id: str, limit: int) -> list[AppVersionEvent]:
        filters = [*self._client_filter(), {"name": "projectId", "value": project_id}]
        return [AppVersionEvent.model_validate(a) for a in self._search("/app-version/search", filters, limit=limit)]


@dataclass
class HTTPLogFetcher:
    """Reads log entries from the log backend using a platform-issued handle."""

    timeout: float = DEFAULT_API_TIMEOUT
    session: requests.Session = field(default_factory=requests.Session)

    def fetch_logs(self, access: LogAccess | None, params: LogFetchParams) -> list[LogEntry]:
        if access is None:
            raise PlatformError(API_ERROR, "Log access is missing", "Retry the operation")

        query: dict[str, Any] = {
            "accessToken": access.access_token,
            "serviceStackId": params.service_id,
            "tail": params.limit,
        }
        if params.severity and params.severity != "all":
            query["severity"] = params.severity
        if params.since is not None:
            query["since"] = params.since.strftime("%Y-%m-%dT%H:%M:%SZ")
        if params.search:
            query["search"] = params.search

        url = normalize_log_url(access.url)
        try:
            response = self.session.get(
                url,
                params=query,
                headers={"Authorization": f"Bearer {access.access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise map_transport_error(e) from e

        log.debug(f"GET log backend -> {response.status_code}")

        if not response.ok:
            raise map_api_error(response.status_code, api_message=f"Log backend returned HTTP {response.status_code}")

        try:
            items = (response.json() or {}).get("items") or []
        except ValueError as e:
            raise PlatformError(API_ERROR, f"Invalid JSON from log backend: {e}") from e

        entries = [
            LogEntry(
                id=item.get("id", ""),
                timestamp=item.get("timestamp", ""),
                severity=item.get("severityLabel", ""),
                message=item.get("message", ""),
                container=item.get("hostname") or None,
            )
            for item in items
        ]
        entries.sort(key=lambda e: e.timestamp)

        if params.limit > 0 and len(entries) > params.limit:
            entries = entries[-params.limit :]
        return entries


def normalize_log_url(url: str) -> str:
    """Strip the method prefix the platform puts on log URLs and force a scheme."""
    if url.startswith("GET "):
        url = url[len("GET ") :]
    if url and not url.startswith(("http://", "https://")):
        url = f"https://{url}"
    return url


# ==============================================================================
# Wire Mapping
# ==============================================================================


def _parse_error_body(response: requests.Response) -> tuple[str, str]:
    try:
        body = response.json()
    except ValueError:
        return "", response.text.strip()

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("code") or ""), str(error.get("message") or "")
    return "", ""


def _map_service(data: dict[str, Any]) -> ServiceStack:
    service = ServiceStack.model_validate({k: v for k, v in data.items() if k != "customAutoscaling"})
    autoscaling = data.get("customAutoscaling")
    if autoscaling:
        service.custom_autoscaling = _map_autoscaling(autoscaling)
    return service


def _map_autoscaling(data: dict[str, Any]) -> CustomAutoscaling:
    vertical = data.get("verticalAutoscaling") or {}
    horizontal = data.get("horizontalAutoscaling") or {}
    min_res = vertical.get("minResource") or {}
    max_res = vertical.get("maxResource") or {}

    return CustomAutoscaling(
        cpu_mode=vertical.get("cpuMode") or "",
        min_cpu=min_res.get("cpuCoreCount") or 0,
        max_cpu=max_res.get("cpuCoreCount") or 0,
        min_ram=min_res.get("memoryGBytes") or 0,
        max_ram=max_res.get("memoryGBytes") or 0,
        min_disk=min_res.get("diskGBytes") or 0,
        max_disk=max_res.get("diskGBytes") or 0,
        horizontal_min_count=horizontal.get("minContainerCount") or 0,
        horizontal_max_count=horizontal.get("maxContainerCount") or 0,
    )


def _autoscaling_body(params: AutoscalingParams) -> dict[str, Any]:
    """Build the nested autoscaling request, sending only the fields that were set."""
    vertical: dict[str, Any] = {}
    if params.cpu_mode is not None:
        vertical["cpuMode"] = params.cpu_mode

    for bound, cpu, ram, disk in (
        ("minResource", params.min_cpu, params.min_ram, params.min_disk),
        ("maxResource", params.max_cpu, params.max_ram, params.max_disk),
    ):
        resource = {
            name: value
            for name, value in (("cpuCoreCount", cpu), ("memoryGBytes", ram), ("diskGBytes", disk))
            if value is not None
        }
        if resource:
            vertical[bound] = resource

    horizontal: dict[str, Any] = {}
    if params.min_replicas is not None:
        horizontal["minContainerCount"] = params.min_replicas
    if params.max_replicas is not None:
        horizontal["maxContainerCount"] = params.max_replicas

    custom: dict[str, Any] = {}
    if vertical:
        custom["verticalAutoscaling"] = vertical
    if horizontal:
        custom["horizontalAutoscaling"] = horizontal
    return {"customAutoscaling": custom} if custom else {}


def _map_process_event(data: dict[str, Any]) -> ProcessEvent:
    event = ProcessEvent.model_validate(data)
    user = data.get("createdByUser") or {}
    event.created_by_email = user.get("email") or ""
    return event
