"""Domain models shared between the platform adapters, services and commands.

Models parse the platform's camelCase JSON and are constructed directly with
snake_case names in code and tests.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ZaiaModel(BaseModel):
    """Base model: camelCase aliases, snake_case attributes, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ==============================================================================
# Identity
# ==============================================================================


class UserInfo(ZaiaModel):
    id: str = ""
    full_name: str = ""
    email: str = ""
    client_id: str = ""


class Project(ZaiaModel):
    id: str
    name: str = ""
    status: str = ""
    client_id: str = ""


# ==============================================================================
# Services
# ==============================================================================


class ServiceTypeInfo(ZaiaModel):
    service_stack_type_version_name: str = ""


class Port(ZaiaModel):
    port: int
    protocol: str = ""
    public: bool = False


class CustomAutoscaling(ZaiaModel):
    """Flattened vertical and horizontal autoscaling configuration."""

    cpu_mode: str = ""
    min_cpu: int = 0
    max_cpu: int = 0
    min_ram: float = 0
    max_ram: float = 0
    min_disk: float = 0
    max_disk: float = 0
    horizontal_min_count: int = 0
    horizontal_max_count: int = 0


class ServiceStack(ZaiaModel):
    id: str
    name: str
    project_id: str = ""
    service_stack_type_info: ServiceTypeInfo = Field(default_factory=ServiceTypeInfo)
    status: str = ""
    mode: str = ""
    ports: list[Port] = Field(default_factory=list)
    custom_autoscaling: CustomAutoscaling | None = None
    created: str = ""
    last_update: str = ""

    @property
    def hostname(self) -> str:
        return self.name

    @property
    def type_version(self) -> str:
        return self.service_stack_type_info.service_stack_type_version_name


class AutoscalingParams(ZaiaModel):
    """Requested scaling changes. ``None`` means "leave unchanged"."""

    cpu_mode: str | None = None
    min_cpu: int | None = None
    max_cpu: int | None = None
    min_ram: float | None = None
    max_ram: float | None = None
    min_disk: float | None = None
    max_disk: float | None = None
    min_replicas: int | None = None
    max_replicas: int | None = None

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


# ==============================================================================
# Processes
# ==============================================================================


class ServiceStackRef(ZaiaModel):
    id: str
    name: str = ""


class Process(ZaiaModel):
    id: str
    action_name: str = ""
    status: str = ""
    service_stacks: list[ServiceStackRef] = Field(default_factory=list)
    created: str = ""
    started: str | None = None
    finished: str | None = None
    fail_reason: str | None = None


class ProcessEvent(ZaiaModel):
    """A process as returned by the history search."""

    id: str
    project_id: str = ""
    service_stacks: list[ServiceStackRef] = Field(default_factory=list)
    action_name: str = ""
    status: str = ""
    created: str = ""
    started: str | None = None
    finished: str | None = None
    created_by_email: str = ""
    created_by_system: bool = False


class BuildInfo(ZaiaModel):
    pipeline_start: str | None = None
    pipeline_finish: str | None = None
    pipeline_failed: str | None = None


class AppVersionEvent(ZaiaModel):
    """A deployment or build as returned by the app version search."""

    id: str
    project_id: str = ""
    service_stack_id: str = ""
    source: str = ""
    status: str = ""
    sequence: int = 0
    build: BuildInfo | None = None
    created: str = ""
    last_update: str = ""


# ==============================================================================
# Environment Variables
# ==============================================================================


class EnvVar(ZaiaModel):
    id: str = ""
    key: str
    content: str = ""


# ==============================================================================
# Import
# ==============================================================================


class ImportFailure(ZaiaModel):
    code: str = ""
    message: str = ""


class ImportedServiceStack(ZaiaModel):
    id: str = ""
    name: str = ""
    processes: list[Process] = Field(default_factory=list)
    error: ImportFailure | None = None


class ImportResult(ZaiaModel):
    project_id: str = ""
    project_name: str = ""
    service_stacks: list[ImportedServiceStack] = Field(default_factory=list)


# ==============================================================================
# Logs
# ==============================================================================


class LogAccess(ZaiaModel):
    """Short-lived handle for the log backend, obtained from the platform."""

    url: str
    access_token: str
    expiration: str = ""


class LogFetchParams(ZaiaModel):
    service_id: str = ""
    severity: str = "all"
    since: datetime | None = None
    limit: int = 100
    search: str = ""


class LogEntry(ZaiaModel):
    id: str = ""
    timestamp: str = ""
    severity: str = ""
    message: str = ""
    container: str | None = None
