import pytest
from fakes import entries

from zaia_cli import __version__
from zaia_cli.errors import PlatformError
from zaia_cli.types import Process, Project


def assert_error(run, code, exit_code):
    assert run.payload["type"] == "error", run.output
    assert run.payload["code"] == code
    assert run.exit_code == exit_code


# Auth


def test_login_single_project(invoke, store):
    run = invoke("login", "tok-new")

    assert run.exit_code == 0
    assert run.payload == {
        "type": "sync",
        "status": "ok",
        "data": {
            "user": {"name": "Test User", "email": "test@example.com"},
            "project": {"id": "proj-1", "name": "my-project"},
            "region": "prg1",
        },
    }
    saved = store.load()
    assert saved.token == "tok-new"
    assert saved.api_host == "api.app-prg1.zerops.io"


def test_login_custom_url_and_region(invoke, store):
    run = invoke("login", "tok-new", "--url", "api.example.com", "--region", "fra1")

    assert run.payload["data"]["region"] == "fra1"
    assert store.load().api_host == "api.example.com"


def test_login_multi_project(invoke, platform, store):
    platform.with_projects(Project(id="p1", name="alpha"), Project(id="p2", name="beta"))
    run = invoke("login", "tok")

    assert_error(run, "TOKEN_MULTI_PROJECT", 2)
    assert "alpha" in run.payload["error"]
    assert run.payload["context"] == {"projects": ["alpha", "beta"]}
    assert not store.path.exists()


def test_login_requires_token(invoke):
    assert_error(invoke("login"), "INVALID_USAGE", 3)


def test_logout_then_discover_requires_auth(invoke, logged_in, platform):
    run = invoke("logout")
    assert run.payload == {"type": "sync", "status": "ok", "data": {"message": "Logged out successfully"}}

    run = invoke("discover")
    assert_error(run, "AUTH_REQUIRED", 2)
    assert run.payload["suggestion"] == "Run: zaia login <token>"
    assert platform.calls == []


def test_logout_without_credentials_succeeds(invoke):
    assert invoke("logout").exit_code == 0


def test_status(invoke, logged_in):
    data = invoke("status").payload["data"]
    assert data["authenticated"] is True
    assert data["project"] == {"id": "proj-1", "name": "my-project"}
    assert data["region"] == "prg1"


def test_version(invoke):
    assert invoke("version").payload["data"] == {"version": __version__}


# Usage


def test_unknown_command(invoke):
    run = invoke("frobnicate")
    assert_error(run, "INVALID_USAGE", 3)
    assert len(run.output.splitlines()) == 1


def test_no_command(invoke):
    run = invoke()
    assert_error(run, "INVALID_USAGE", 3)
    assert "discover" in run.payload["context"]["availableCommands"]


def test_bad_option_value(invoke, logged_in):
    assert_error(invoke("scale", "--service", "api", "--min-cpu", "lots"), "INVALID_USAGE", 3)


def test_help_is_plain_text(invoke):
    run = invoke("--help")
    assert run.exit_code == 0
    assert "discover" in run.output


@pytest.mark.parametrize("group", ["env", "subdomain"])
def test_bare_group_is_usage_error(invoke, logged_in, group):
    assert_error(invoke(group), "INVALID_USAGE", 3)


def test_unexpected_exception_becomes_api_error(invoke, logged_in, platform):
    platform.with_error("list_services", RuntimeError("kaboom"))
    run = invoke("start", "--service", "api")

    assert_error(run, "API_ERROR", 1)
    assert run.payload["error"] == "kaboom"


# Discovery and processes


def test_discover(invoke, logged_in):
    run = invoke("discover")
    assert run.exit_code == 0
    assert [s["hostname"] for s in run.payload["data"]["services"]] == ["api", "db"]


def test_discover_unknown_service(invoke, logged_in):
    assert_error(invoke("discover", "--service", "ghost"), "SERVICE_NOT_FOUND", 4)


def test_process_status(invoke, logged_in, platform):
    platform.with_process(Process(id="p1", action_name="start", status="RUNNING"))
    run = invoke("process", "p1")
    assert run.payload["data"]["status"] == "RUNNING"


def test_process_not_found(invoke, logged_in):
    assert_error(invoke("process", "ghost"), "PROCESS_NOT_FOUND", 4)


def test_cancel_terminal_process(invoke, logged_in, platform):
    platform.with_process(Process(id="p1", action_name="start", status="DONE"))
    run = invoke("cancel", "p1")

    assert_error(run, "PROCESS_ALREADY_TERMINAL", 4)
    assert "cancel_process" not in platform.calls


def test_cancel_running_process(invoke, logged_in, platform):
    platform.with_process(Process(id="p1", action_name="start", status="PENDING"))
    data = invoke("cancel", "p1").payload["data"]
    assert data["status"] == "CANCELED"


# Lifecycle


def test_start_is_async(invoke, logged_in):
    run = invoke("start", "--service", "api")

    assert run.exit_code == 0
    assert run.payload["type"] == "async"
    assert run.payload["status"] == "initiated"
    process = run.payload["processes"][0]
    assert process["serviceHostname"] == "api"
    assert process["status"] == "FINISHED"


def test_async_element_always_has_action_name(invoke, logged_in, platform, monkeypatch):
    monkeypatch.setattr(platform, "delete_service", lambda service_id: Process(id="p1", status="PENDING"))
    run = invoke("delete", "--service", "api", "--confirm")

    assert run.payload["processes"][0]["actionName"] == "delete"


def test_start_unknown_service(invoke, logged_in):
    run = invoke("start", "--service", "ghost")

    assert_error(run, "SERVICE_NOT_FOUND", 4)
    assert run.payload["suggestion"] == "Available services: api, db"
    assert run.payload["context"]["availableHostnames"] == ["api", "db"]


@pytest.mark.parametrize("command", ["start", "stop", "restart", "scale", "logs", "delete"])
def test_service_flag_required(invoke, logged_in, command):
    assert_error(invoke(command), "SERVICE_REQUIRED", 3)


def test_service_flag_checked_after_auth(invoke):
    assert_error(invoke("start"), "AUTH_REQUIRED", 2)


def test_scale_min_above_max(invoke, logged_in, platform):
    run = invoke("scale", "--service", "api", "--min-cpu", "4", "--max-cpu", "2")

    assert_error(run, "INVALID_SCALING", 3)
    assert platform.calls == []


def test_scale_without_parameters(invoke, logged_in, platform):
    assert_error(invoke("scale", "--service", "api"), "INVALID_SCALING", 3)
    assert platform.calls == []


def test_scale_sync(invoke, logged_in, platform):
    run = invoke("scale", "--service", "api", "--cpu-mode", "dedicated", "--max-ram", "4")

    assert run.payload["type"] == "sync"
    assert run.payload["data"]["message"] == "Scaling parameters updated"
    assert platform.last_autoscaling.cpu_mode == "DEDICATED"
    assert platform.last_autoscaling.max_ram == 4.0


def test_delete_requires_confirm(invoke, logged_in, platform):
    assert_error(invoke("delete", "--service", "api"), "CONFIRM_REQUIRED", 3)
    assert platform.calls == []


def test_delete_confirmed(invoke, logged_in):
    assert invoke("delete", "--service", "api", "--confirm").payload["type"] == "async"


# Environment variables


def test_env_round_trip(invoke, logged_in):
    run = invoke("env", "set", "--service", "api", "A=1", "B=two")
    assert run.payload["type"] == "async"

    data = invoke("env", "get", "--service", "api").payload["data"]
    assert data["vars"] == [{"key": "A", "value": "1"}, {"key": "B", "value": "two"}]

    run = invoke("env", "delete", "--service", "api", "A")
    assert run.payload["type"] == "async"

    data = invoke("env", "get", "--service", "api").payload["data"]
    assert data["vars"] == [{"key": "B", "value": "two"}]


def test_env_project_scope(invoke, logged_in):
    run = invoke("env", "set", "--project", "A=1", "B=2")
    assert len(run.payload["processes"]) == 2

    data = invoke("env", "get", "--project").payload["data"]
    assert data == {"scope": "project", "vars": [{"key": "A", "value": "1"}, {"key": "B", "value": "2"}]}


def test_env_requires_scope(invoke, logged_in):
    assert_error(invoke("env", "get"), "SERVICE_REQUIRED", 3)


def test_env_bad_pair(invoke, logged_in, platform):
    assert_error(invoke("env", "set", "--service", "api", "NOEQUALS"), "INVALID_ENV_FORMAT", 3)
    assert "set_service_env_file" not in platform.calls


def test_env_delete_missing_key(invoke, logged_in):
    run = invoke("env", "delete", "--service", "api", "NOPE")
    assert_error(run, "API_ERROR", 1)
    assert run.payload["context"]["missingKeys"] == ["NOPE"]


# Import and validate


def test_import_dry_run(invoke, logged_in, platform):
    run = invoke("import", "--content", "services:\n  - hostname: web\n    type: nodejs@22\n", "--dry-run")

    assert run.payload["data"]["dryRun"] is True
    assert run.payload["data"]["services"] == [{"action": "create", "hostname": "web", "type": "nodejs@22"}]
    assert "import_services" not in platform.calls


def test_import(invoke, logged_in):
    run = invoke("import", "--content", "services:\n  - hostname: web\n")
    assert run.payload["processes"][0]["actionName"] == "import"


def test_import_rejects_project_section(invoke, logged_in, platform):
    run = invoke("import", "--content", "project:\n  name: x\nservices: []\n")
    assert_error(run, "IMPORT_HAS_PROJECT", 3)
    assert "import_services" not in platform.calls


def test_import_requires_source(invoke, logged_in):
    assert_error(invoke("import"), "INVALID_PARAMETER", 3)


def test_validate_without_login(invoke, tmp_path):
    path = tmp_path / "zerops.yml"
    path.write_text("zerops:\n  - setup: api\n")

    run = invoke("validate", "--file", str(path))
    assert run.payload["data"]["valid"] is True


def test_validate_reports_errors(invoke):
    run = invoke("validate", "--content", "foo: bar", "--type", "zerops.yml")
    assert_error(run, "INVALID_ZEROPS_YML", 3)
    assert run.payload["context"]["errors"][0]["error"] == "Missing 'zerops' key"


# Subdomain


def test_subdomain_enable(invoke, logged_in):
    run = invoke("subdomain", "enable", "--service", "api")
    assert run.payload["processes"][0]["actionName"] == "enableSubdomain"


def test_subdomain_already_enabled_is_success(invoke, logged_in, platform):
    platform.with_error("enable_subdomain_access", PlatformError("SUBDOMAIN_ALREADY_ENABLED", "already on"))
    run = invoke("subdomain", "enable", "--service", "api")

    assert run.exit_code == 0
    assert run.payload["type"] == "sync"
    assert run.payload["data"]["status"] == "already_enabled"


def test_subdomain_failure_is_api_error(invoke, logged_in, platform):
    platform.with_error("disable_subdomain_access", PlatformError("PERMISSION_DENIED", "forbidden"))
    run = invoke("subdomain", "disable", "--service", "api")

    assert_error(run, "API_ERROR", 1)
    assert run.payload["error"] == "forbidden"


# Logs and events


def test_logs(invoke, logged_in, log_fetcher):
    log_fetcher.entries = entries("started", "listening")
    run = invoke("logs", "--service", "api", "--severity", "ERROR", "--limit", "5", "--since", "30m")

    assert run.payload["data"]["hasMore"] is False
    assert [e["message"] for e in run.payload["data"]["entries"]] == ["started", "listening"]
    assert log_fetcher.requests[0][1].severity == "error"


@pytest.mark.parametrize("args", [("--since", "2000m"), ("--since", "yesterday"), ("--limit", "0")])
def test_logs_rejects_parameters(invoke, logged_in, log_fetcher, args):
    assert_error(invoke("logs", "--service", "api", *args), "INVALID_PARAMETER", 3)
    assert log_fetcher.requests == []


def test_events(invoke, logged_in, platform):
    run = invoke("events", "--limit", "5")
    assert run.payload["data"] == {
        "projectId": "proj-1",
        "events": [],
        "summary": {"total": 0, "processes": 0, "deploys": 0},
    }


def test_network_error_exit_code(invoke, logged_in, platform):
    platform.with_error("list_services", PlatformError("NETWORK_ERROR", "refused"))
    assert_error(invoke("start", "--service", "api"), "NETWORK_ERROR", 6)
