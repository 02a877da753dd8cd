import pytest
import requests

from zaia_cli.errors import (
    API_ERROR,
    API_RATE_LIMITED,
    API_TIMEOUT,
    AUTH_TOKEN_EXPIRED,
    NETWORK_ERROR,
    PERMISSION_DENIED,
    PROCESS_NOT_FOUND,
    SERVICE_NOT_FOUND,
    SUBDOMAIN_ALREADY_DISABLED,
    SUBDOMAIN_ALREADY_ENABLED,
    ZaiaError,
    exit_code_for,
    map_api_error,
    map_transport_error,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("AUTH_REQUIRED", 2),
        ("TOKEN_MULTI_PROJECT", 2),
        ("INVALID_SCALING", 3),
        ("INVALID_USAGE", 3),
        ("SERVICE_NOT_FOUND", 4),
        ("PROCESS_ALREADY_TERMINAL", 4),
        ("PERMISSION_DENIED", 5),
        ("NETWORK_ERROR", 6),
        ("SETUP_UNSUPPORTED_OS", 7),
        ("API_ERROR", 1),
        ("API_TIMEOUT", 1),
        ("SOMETHING_NEW", 1),
    ],
)
def test_exit_code_for(code, expected):
    assert exit_code_for(code) == expected


def test_zaia_error_exit_code_and_empty_suggestion():
    err = ZaiaError("INVALID_PARAMETER", "bad", suggestion="")
    assert err.exit_code == 3
    assert err.suggestion is None
    assert str(err) == "bad"


@pytest.mark.parametrize(
    "status, entity, expected",
    [
        (401, "service", AUTH_TOKEN_EXPIRED),
        (403, "service", PERMISSION_DENIED),
        (404, "service", SERVICE_NOT_FOUND),
        (404, "process", PROCESS_NOT_FOUND),
        (429, "service", API_RATE_LIMITED),
        (500, "service", API_ERROR),
        (503, "service", API_ERROR),
        (400, "service", API_ERROR),
    ],
)
def test_map_api_error_by_status(status, entity, expected):
    assert map_api_error(status, entity=entity).code == expected


def test_map_api_error_prefers_body_message():
    err = map_api_error(400, "invalidInput", "Field is wrong")
    assert err.message == "Field is wrong"
    assert map_api_error(400).message == "HTTP 400"


def test_map_api_error_recognizes_subdomain_codes_before_status():
    enabled = map_api_error(400, "serviceStackSubdomainAccessAlreadyEnabled")
    disabled = map_api_error(404, "subdomainAccessAlreadyDisabled")

    assert enabled.code == SUBDOMAIN_ALREADY_ENABLED
    assert enabled.context == {"apiCode": "serviceStackSubdomainAccessAlreadyEnabled"}
    assert disabled.code == SUBDOMAIN_ALREADY_DISABLED


def test_map_transport_error():
    assert map_transport_error(requests.ConnectTimeout("slow")).code == API_TIMEOUT
    assert map_transport_error(requests.ReadTimeout("slow")).code == API_TIMEOUT
    assert map_transport_error(requests.ConnectionError("refused")).code == NETWORK_ERROR
    assert map_transport_error(requests.RequestException("odd")).code == API_ERROR
