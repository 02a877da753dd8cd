"""Service import from import.yml content."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from loguru import logger as log

from zaia_cli.errors import (
    API_ERROR,
    FILE_NOT_FOUND,
    IMPORT_HAS_PROJECT,
    INVALID_IMPORT_YML,
    INVALID_PARAMETER,
    ZaiaError,
)
from zaia_cli.output import OperationResult, process_to_output
from zaia_cli.ports import PlatformPort

IMPORT_ACTION = "import"


def read_yaml_source(file: str | None, content: str | None, command: str = "import") -> tuple[str, str]:
    """Return ``(content, source)`` from inline content or a file path.

    Raises:
        ZaiaError: INVALID_PARAMETER when neither is given, FILE_NOT_FOUND
            when the file cannot be read
    """
    if content:
        return content, "inline"
    if not file:
        raise ZaiaError(
            INVALID_PARAMETER,
            "--file or --content is required",
            f"Run: zaia {command} --file services.yml or zaia {command} --content '<yaml>'",
        )
    try:
        return Path(file).read_text(encoding="utf-8"), file
    except OSError as e:
        raise ZaiaError(FILE_NOT_FOUND, f"Cannot read file: {file}", context={"file": file}) from e


def has_project_section(content: str) -> bool:
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError:
        return False
    return isinstance(parsed, dict) and "project" in parsed


def reject_project_section(content: str, project_id: str = "") -> None:
    if has_project_section(content):
        raise ZaiaError(
            IMPORT_HAS_PROJECT,
            "import.yml must not contain 'project:' section in project-scoped context",
            "Remove the 'project:' section. ZAIA imports services into the current project context. "
            "Only 'services:' array is expected.",
            {"projectId": project_id} if project_id else None,
        )


def preview_import(content: str) -> dict[str, Any]:
    """Parse import YAML and describe what would be created, without calling the platform."""
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ZaiaError(INVALID_IMPORT_YML, f"Invalid YAML syntax: {e}") from e

    if not isinstance(parsed, dict) or "services" not in parsed:
        raise ZaiaError(
            INVALID_IMPORT_YML,
            "Missing 'services' section",
            "import.yml must contain a 'services:' array",
        )

    services = parsed["services"]
    if not isinstance(services, list):
        raise ZaiaError(
            INVALID_IMPORT_YML,
            "'services' must be an array",
            "Format: services:\n  - hostname: api\n    type: nodejs@22",
        )

    preview = []
    for service in services:
        if not isinstance(service, dict):
            continue
        entry: dict[str, Any] = {"action": "create"}
        hostname = service.get("hostname", service.get("name"))
        if hostname is not None:
            entry["hostname"] = hostname
        if "type" in service:
            entry["type"] = service["type"]
        preview.append(entry)

    return {"dryRun": True, "valid": True, "services": preview, "warnings": []}


def import_services(client: PlatformPort, project_id: str, content: str) -> OperationResult:
    """Import services and collect every process the platform started.

    Raises:
        ZaiaError: API_ERROR when nothing started and some service stacks failed
    """
    result = client.import_services(project_id, content)

    processes = []
    failures = []
    for stack in result.service_stacks:
        if stack.error is not None:
            failures.append({"hostname": stack.name, "code": stack.error.code, "message": stack.error.message})
        for process in stack.processes:
            output = process_to_output(process, stack.name)
            processes.append(output.model_copy(update={"action_name": IMPORT_ACTION, "service_id": stack.id or None}))

    if failures and not processes:
        raise ZaiaError(
            API_ERROR,
            f"Import failed for {len(failures)} service(s)",
            "Fix the reported services and retry",
            {"services": failures},
        )
    for failure in failures:
        log.warning(f"Import of '{failure['hostname']}' failed: {failure['message']}")

    return OperationResult(
        processes=processes,
        data={"message": "Import produced no processes", "projectId": project_id, "services": []},
    )
