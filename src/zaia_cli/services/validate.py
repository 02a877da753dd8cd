"""Lightweight structural validation of zerops.yml and import.yml."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from zaia_cli.errors import (
    FILE_NOT_FOUND,
    IMPORT_HAS_PROJECT,
    INVALID_IMPORT_YML,
    INVALID_ZEROPS_YML,
    UNKNOWN_TYPE,
    ZEROPS_YML_NOT_FOUND,
    ZaiaError,
)

ZEROPS_YML = "zerops.yml"
IMPORT_YML = "import.yml"
YAML_TYPES = (ZEROPS_YML, IMPORT_YML)


def load_source(file: str | None, content: str | None) -> tuple[str, str]:
    """Return ``(content, source)``; defaults to ./zerops.yml."""
    if content:
        return content, "inline"

    path = file or ZEROPS_YML
    try:
        return Path(path).read_text(encoding="utf-8"), path
    except FileNotFoundError as e:
        if path == ZEROPS_YML:
            raise ZaiaError(
                ZEROPS_YML_NOT_FOUND,
                "zerops.yml not found in current directory",
                "Create zerops.yml or use --file to specify path",
            ) from e
        raise ZaiaError(FILE_NOT_FOUND, f"Cannot read file: {path}") from e
    except OSError as e:
        raise ZaiaError(FILE_NOT_FOUND, f"Cannot read file: {path}") from e


def detect_type(source: str, content: str) -> str:
    """Guess the file type from its name, then from its top-level keys."""
    if "import" in source:
        return IMPORT_YML
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError:
        return ZEROPS_YML
    if isinstance(parsed, dict) and "services" in parsed:
        return IMPORT_YML
    return ZEROPS_YML


def _issue(path: str, error: str, fix: str) -> dict[str, str]:
    return {"path": path, "error": error, "fix": fix}


def _parse(content: str, source: str, code: str, label: str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ZaiaError(
            code,
            f"{label} validation failed",
            context={
                "file": source,
                "errors": [_issue("", f"Invalid YAML syntax: {e}", "Check YAML formatting")],
            },
        ) from e


def _ok(source: str, file_type: str) -> dict[str, Any]:
    return {"valid": True, "file": source, "type": file_type, "warnings": [], "info": []}


def validate_zerops_yml(content: str, source: str) -> dict[str, Any]:
    parsed = _parse(content, source, INVALID_ZEROPS_YML, ZEROPS_YML)

    errors = []
    if not isinstance(parsed, dict) or "zerops" not in parsed:
        errors.append(_issue("", "Missing 'zerops' key", "Add: zerops:\n  - run:\n      base: nodejs@22"))
    elif not isinstance(parsed["zerops"], list):
        errors.append(
            _issue("zerops", "'zerops' must be an array", "Format: zerops:\n  - run:\n      base: nodejs@22")
        )
    elif not parsed["zerops"]:
        errors.append(_issue("zerops", "'zerops' array is empty", "Add at least one service configuration"))

    if errors:
        raise ZaiaError(INVALID_ZEROPS_YML, "zerops.yml validation failed", context={"file": source, "errors": errors})
    return _ok(source, ZEROPS_YML)


def validate_import_yml(content: str, source: str) -> dict[str, Any]:
    parsed = _parse(content, source, INVALID_IMPORT_YML, IMPORT_YML)

    if isinstance(parsed, dict) and "project" in parsed:
        raise ZaiaError(
            IMPORT_HAS_PROJECT,
            "import.yml must not contain 'project:' section in project-scoped context",
            "Remove the 'project:' section. ZAIA imports services into the current project context.",
            {"file": source},
        )

    if not isinstance(parsed, dict) or "services" not in parsed:
        raise ZaiaError(
            INVALID_IMPORT_YML,
            "import.yml validation failed",
            context={
                "file": source,
                "errors": [_issue("", "Missing 'services' key", "Add: services:\n  - hostname: api\n    type: nodejs@22")],
            },
        )
    return _ok(source, IMPORT_YML)


def validate_yaml(file: str | None = None, content: str | None = None, file_type: str | None = None) -> dict[str, Any]:
    """Validate a zerops.yml or import.yml file or inline content."""
    text, source = load_source(file, content)
    file_type = file_type or detect_type(source, text)

    if file_type == ZEROPS_YML:
        return validate_zerops_yml(text, source)
    if file_type == IMPORT_YML:
        return validate_import_yml(text, source)
    raise ZaiaError(
        UNKNOWN_TYPE,
        f"Unknown file type: {file_type}",
        "Specify --type zerops.yml or --type import.yml",
    )
