"""Credential storage and resolution.

The credential file holds one identity record. It is written with
write-to-temp-then-rename so an interrupted save never truncates it.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from loguru import logger as log
from pydantic import Field, ValidationError

from zaia_cli.errors import (
    AUTH_API_ERROR,
    AUTH_INVALID_TOKEN,
    AUTH_REQUIRED,
    API_TIMEOUT,
    NETWORK_ERROR,
    TOKEN_MULTI_PROJECT,
    TOKEN_NO_PROJECT,
    AuthError,
    PlatformError,
)
from zaia_cli.ports import PlatformPort
from zaia_cli.types import ZaiaModel


# ==============================================================================
# Stored Record
# ==============================================================================


class RegionData(ZaiaModel):
    name: str = ""
    is_default: bool = False
    address: str = ""
    gui_address: str | None = None


class ProjectRef(ZaiaModel):
    id: str = ""
    name: str = ""


class UserRef(ZaiaModel):
    name: str = ""
    email: str = ""


class StoredData(ZaiaModel):
    """On-disk credential record."""

    token: str = ""
    api_host: str = ""
    region_data: RegionData = Field(default_factory=RegionData)
    project: ProjectRef = Field(default_factory=ProjectRef)
    user: UserRef = Field(default_factory=UserRef)


@dataclass(frozen=True)
class Credentials:
    """Resolved identity for one invocation."""

    token: str
    api_host: str
    project_id: str
    project_name: str
    region: str


class CredentialStore:
    """Loads, saves and clears the credential file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> StoredData:
        """Read the record. A missing file yields an empty record."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoredData()
        return StoredData.model_validate_json(raw)

    def save(self, data: StoredData) -> None:
        """Atomically replace the record with user-only permissions."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # mkstemp creates the file with mode 0600
        fd, name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name + ".", suffix=".tmp")
        tmp_path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as writer:
                writer.write(data.model_dump_json(by_alias=True, exclude_none=True, indent=2))
                writer.flush()
                os.fsync(writer.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        """Remove the record. Removing a missing file is not an error."""
        self.path.unlink(missing_ok=True)


# ==============================================================================
# Resolution
# ==============================================================================


def resolve_credentials(store: CredentialStore) -> Credentials:
    """Turn the stored record into ``Credentials`` without touching the network.

    Raises:
        AuthError: AUTH_REQUIRED when not logged in or no project is attached
    """
    try:
        data = store.load()
    except (OSError, ValidationError) as e:
        log.debug(f"Credential file unreadable: {e}")
        data = StoredData()

    if not data.token:
        raise AuthError(AUTH_REQUIRED, "Not authenticated", "Run: zaia login <token>")
    if not data.project.id:
        raise AuthError(
            AUTH_REQUIRED,
            "Authenticated but no project discovered",
            "Run: zaia login <token>",
        )

    return Credentials(
        token=data.token,
        api_host=data.api_host,
        project_id=data.project.id,
        project_name=data.project.name,
        region=data.region_data.name,
    )


# ==============================================================================
# Login
# ==============================================================================


@dataclass
class LoginResult:
    user_name: str
    user_email: str
    project_id: str
    project_name: str
    region: str

    def to_dict(self) -> dict:
        return {
            "user": {"name": self.user_name, "email": self.user_email},
            "project": {"id": self.project_id, "name": self.project_name},
            "region": self.region,
        }


def login(
    store: CredentialStore,
    client: PlatformPort,
    token: str,
    api_host: str,
    region: str,
) -> LoginResult:
    """Validate a project-scoped token and persist it.

    Nothing is written unless the token resolves to exactly one project, so a
    failed login leaves existing credentials untouched.
    """
    try:
        user = client.get_user_info()
    except PlatformError as e:
        if e.code in (NETWORK_ERROR, API_TIMEOUT):
            raise
        raise AuthError(
            AUTH_INVALID_TOKEN,
            "Authentication failed: invalid token",
            "Check your Personal Access Token in Zerops GUI",
        ) from e

    try:
        projects = client.list_projects()
    except PlatformError as e:
        raise AuthError(AUTH_API_ERROR, f"Failed to list projects: {e.message}") from e

    if not projects:
        raise AuthError(
            TOKEN_NO_PROJECT,
            "Token has no project access",
            "Create a project-scoped token in Zerops GUI",
        )
    if len(projects) > 1:
        names = [p.name for p in projects]
        raise AuthError(
            TOKEN_MULTI_PROJECT,
            f"Token has access to {len(projects)} projects: {', '.join(names)}. "
            "ZAIA requires a single-project-scoped token.",
            "Create a token scoped to one project. Found: " + ", ".join(names),
            context={"projects": names},
        )

    project = projects[0]
    store.save(
        StoredData(
            token=token,
            api_host=api_host,
            region_data=RegionData(name=region, is_default=True, address=api_host),
            project=ProjectRef(id=project.id, name=project.name),
            user=UserRef(name=user.full_name, email=user.email),
        )
    )
    log.debug(f"Logged in to project {project.name} ({project.id})")

    return LoginResult(
        user_name=user.full_name,
        user_email=user.email,
        project_id=project.id,
        project_name=project.name,
        region=region,
    )
