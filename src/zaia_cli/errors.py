"""Error taxonomy - closed set of error codes, exit codes and exceptions.

Every failure surfaced by a command is a ``ZaiaError`` carrying one of the
codes below. The exit code of the process is derived from the code alone.
"""

from __future__ import annotations

from typing import Any

import requests

# ==============================================================================
# Error Codes
# ==============================================================================

# Auth
AUTH_REQUIRED = "AUTH_REQUIRED"
AUTH_INVALID_TOKEN = "AUTH_INVALID_TOKEN"
AUTH_TOKEN_EXPIRED = "AUTH_TOKEN_EXPIRED"
AUTH_API_ERROR = "AUTH_API_ERROR"
TOKEN_NO_PROJECT = "TOKEN_NO_PROJECT"
TOKEN_MULTI_PROJECT = "TOKEN_MULTI_PROJECT"

# Validation / usage
SERVICE_REQUIRED = "SERVICE_REQUIRED"
CONFIRM_REQUIRED = "CONFIRM_REQUIRED"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
ZEROPS_YML_NOT_FOUND = "ZEROPS_YML_NOT_FOUND"
INVALID_ZEROPS_YML = "INVALID_ZEROPS_YML"
INVALID_IMPORT_YML = "INVALID_IMPORT_YML"
IMPORT_HAS_PROJECT = "IMPORT_HAS_PROJECT"
INVALID_SCALING = "INVALID_SCALING"
INVALID_PARAMETER = "INVALID_PARAMETER"
INVALID_ENV_FORMAT = "INVALID_ENV_FORMAT"
INVALID_HOSTNAME = "INVALID_HOSTNAME"
UNKNOWN_TYPE = "UNKNOWN_TYPE"
INVALID_USAGE = "INVALID_USAGE"

# Not found
SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
PROCESS_NOT_FOUND = "PROCESS_NOT_FOUND"
PROCESS_ALREADY_TERMINAL = "PROCESS_ALREADY_TERMINAL"

# Permission
PERMISSION_DENIED = "PERMISSION_DENIED"

# Network
NETWORK_ERROR = "NETWORK_ERROR"

# Local setup
SETUP_DOWNLOAD_FAILED = "SETUP_DOWNLOAD_FAILED"
SETUP_INSTALL_FAILED = "SETUP_INSTALL_FAILED"
SETUP_CONFIG_FAILED = "SETUP_CONFIG_FAILED"
SETUP_UNSUPPORTED_OS = "SETUP_UNSUPPORTED_OS"

# Generic / platform
API_ERROR = "API_ERROR"
API_TIMEOUT = "API_TIMEOUT"
API_RATE_LIMITED = "API_RATE_LIMITED"
SUBDOMAIN_ALREADY_ENABLED = "SUBDOMAIN_ALREADY_ENABLED"
SUBDOMAIN_ALREADY_DISABLED = "SUBDOMAIN_ALREADY_DISABLED"


# ==============================================================================
# Exit Codes
# ==============================================================================

EXIT_OK = 0
EXIT_GENERIC = 1
EXIT_AUTH = 2
EXIT_VALIDATION = 3
EXIT_NOT_FOUND = 4
EXIT_PERMISSION = 5
EXIT_NETWORK = 6
EXIT_SETUP = 7

_EXIT_CLASSES: dict[int, tuple[str, ...]] = {
    EXIT_AUTH: (
        AUTH_REQUIRED,
        AUTH_INVALID_TOKEN,
        AUTH_TOKEN_EXPIRED,
        AUTH_API_ERROR,
        TOKEN_NO_PROJECT,
        TOKEN_MULTI_PROJECT,
    ),
    EXIT_VALIDATION: (
        SERVICE_REQUIRED,
        CONFIRM_REQUIRED,
        FILE_NOT_FOUND,
        ZEROPS_YML_NOT_FOUND,
        INVALID_ZEROPS_YML,
        INVALID_IMPORT_YML,
        IMPORT_HAS_PROJECT,
        INVALID_SCALING,
        INVALID_PARAMETER,
        INVALID_ENV_FORMAT,
        INVALID_HOSTNAME,
        UNKNOWN_TYPE,
        INVALID_USAGE,
    ),
    EXIT_NOT_FOUND: (
        SERVICE_NOT_FOUND,
        PROCESS_NOT_FOUND,
        PROCESS_ALREADY_TERMINAL,
    ),
    EXIT_PERMISSION: (PERMISSION_DENIED,),
    EXIT_NETWORK: (NETWORK_ERROR,),
    EXIT_SETUP: (
        SETUP_DOWNLOAD_FAILED,
        SETUP_INSTALL_FAILED,
        SETUP_CONFIG_FAILED,
        SETUP_UNSUPPORTED_OS,
    ),
}

EXIT_CODES: dict[str, int] = {code: exit_code for exit_code, codes in _EXIT_CLASSES.items() for code in codes}


def exit_code_for(code: str) -> int:
    """Map an error code to its process exit code. Unknown codes exit with 1."""
    return EXIT_CODES.get(code, EXIT_GENERIC)


# ==============================================================================
# Exceptions
# ==============================================================================


class ZaiaError(Exception):
    """A classified failure that is rendered as an error envelope."""

    def __init__(
        self,
        code: str,
        message: str,
        suggestion: str | None = None,
        context: Any = None,
    ):
        self.code = code
        self.message = message
        self.suggestion = suggestion or None
        self.context = context
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.code)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class AuthError(ZaiaError):
    """Raised when credentials are missing, invalid or ambiguous."""


class PlatformError(ZaiaError):
    """Raised by platform adapters once a transport or HTTP failure is classified."""


# ==============================================================================
# Platform Boundary Mapping
# ==============================================================================

_ALREADY_ENABLED_CODES = ("subdomainaccessalreadyenabled",)
_ALREADY_DISABLED_CODES = ("subdomainaccessalreadydisabled",)


def map_api_error(
    status_code: int,
    api_code: str = "",
    api_message: str = "",
    entity: str = "service",
) -> PlatformError:
    """Classify an HTTP error response from the platform API.

    Args:
        status_code: HTTP status of the response
        api_code: Machine-readable error code from the response body, if any
        api_message: Human message from the response body, if any
        entity: What the request addressed ("service", "process" or "project"),
            used to pick the right not-found code

    Returns:
        PlatformError carrying the taxonomy code
    """
    message = api_message or api_code or f"HTTP {status_code}"
    lowered = api_code.lower()

    if any(c in lowered for c in _ALREADY_ENABLED_CODES):
        return PlatformError(SUBDOMAIN_ALREADY_ENABLED, message, context={"apiCode": api_code})
    if any(c in lowered for c in _ALREADY_DISABLED_CODES):
        return PlatformError(SUBDOMAIN_ALREADY_DISABLED, message, context={"apiCode": api_code})

    if status_code == 401:
        return PlatformError(AUTH_TOKEN_EXPIRED, message, "Run: zaia login <token>")
    if status_code == 403:
        return PlatformError(PERMISSION_DENIED, message, "Check token permissions")
    if status_code == 404:
        if entity == "process":
            return PlatformError(PROCESS_NOT_FOUND, message, "Check process ID")
        return PlatformError(SERVICE_NOT_FOUND, message, "Check service hostname")
    if status_code == 429:
        return PlatformError(API_RATE_LIMITED, message, "Wait and retry")
    if status_code >= 500:
        return PlatformError(API_ERROR, message, "Zerops API error, retry later")
    return PlatformError(API_ERROR, message)


def map_transport_error(exc: requests.RequestException) -> PlatformError:
    """Classify a requests failure that produced no HTTP response."""
    if isinstance(exc, requests.Timeout):
        return PlatformError(API_TIMEOUT, f"Request timed out: {exc}", "Retry the operation")
    if isinstance(exc, requests.ConnectionError):
        return PlatformError(NETWORK_ERROR, f"Network error: {exc}", "Check network connectivity")
    return PlatformError(API_ERROR, str(exc))
