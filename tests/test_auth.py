import json
import os
import stat

import pytest

from zaia_cli.auth import (
    CredentialStore,
    ProjectRef,
    StoredData,
    login,
    resolve_credentials,
)
from zaia_cli.errors import PlatformError, ZaiaError
from zaia_cli.types import Project


def test_load_missing_file_is_empty(store):
    assert store.load() == StoredData()


def test_save_writes_camel_case_with_user_only_permissions(store):
    store.save(StoredData(token="t", api_host="h", project=ProjectRef(id="p", name="n")))

    raw = json.loads(store.path.read_text())
    assert raw["token"] == "t"
    assert raw["apiHost"] == "h"
    assert raw["project"] == {"id": "p", "name": "n"}
    assert "regionData" in raw
    assert list(store.path.parent.iterdir()) == [store.path]
    if os.name == "posix":
        assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_repeated_saves_leave_no_temp_files(store):
    store.save(StoredData(token="first"))
    store.save(StoredData(token="second"))

    assert store.load().token == "second"
    assert list(store.path.parent.iterdir()) == [store.path]


def test_failed_save_keeps_previous_record(store, monkeypatch):
    store.save(StoredData(token="first"))

    def fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(OSError):
        store.save(StoredData(token="second"))

    assert store.load().token == "first"
    assert list(store.path.parent.iterdir()) == [store.path]


def test_clear_is_idempotent(logged_in):
    logged_in.clear()
    logged_in.clear()
    assert not logged_in.path.exists()


def test_resolve_credentials(logged_in):
    creds = resolve_credentials(logged_in)
    assert creds.token == "tok-1"
    assert creds.project_id == "proj-1"
    assert creds.project_name == "my-project"
    assert creds.region == "prg1"


def test_resolve_credentials_not_authenticated(store):
    with pytest.raises(ZaiaError) as exc:
        resolve_credentials(store)
    assert exc.value.code == "AUTH_REQUIRED"
    assert exc.value.message == "Not authenticated"


def test_resolve_credentials_without_project(store):
    store.save(StoredData(token="t", api_host="h"))
    with pytest.raises(ZaiaError) as exc:
        resolve_credentials(store)
    assert exc.value.code == "AUTH_REQUIRED"
    assert "no project" in exc.value.message


def test_resolve_credentials_corrupt_file(store):
    store.path.write_text("{not json")
    with pytest.raises(ZaiaError) as exc:
        resolve_credentials(store)
    assert exc.value.code == "AUTH_REQUIRED"


def test_login_saves_single_project(store, platform):
    result = login(store, platform, "tok-new", "api.example.com", "prg1")

    assert result.to_dict() == {
        "user": {"name": "Test User", "email": "test@example.com"},
        "project": {"id": "proj-1", "name": "my-project"},
        "region": "prg1",
    }
    saved = store.load()
    assert saved.token == "tok-new"
    assert saved.api_host == "api.example.com"
    assert saved.project.id == "proj-1"
    assert saved.user.email == "test@example.com"


def test_login_multi_project_lists_names_and_saves_nothing(store, platform):
    platform.with_projects(Project(id="p1", name="alpha"), Project(id="p2", name="beta"))

    with pytest.raises(ZaiaError) as exc:
        login(store, platform, "tok", "h", "prg1")

    assert exc.value.code == "TOKEN_MULTI_PROJECT"
    assert "alpha" in exc.value.message and "beta" in exc.value.message
    assert exc.value.context == {"projects": ["alpha", "beta"]}
    assert not store.path.exists()


def test_login_no_project(store, platform):
    platform.with_projects()
    with pytest.raises(ZaiaError) as exc:
        login(store, platform, "tok", "h", "prg1")
    assert exc.value.code == "TOKEN_NO_PROJECT"
    assert not store.path.exists()


def test_login_invalid_token_keeps_existing_credentials(logged_in, platform):
    platform.with_error("get_user_info", PlatformError("AUTH_TOKEN_EXPIRED", "unauthorized"))

    with pytest.raises(ZaiaError) as exc:
        login(logged_in, platform, "bad", "h", "prg1")

    assert exc.value.code == "AUTH_INVALID_TOKEN"
    assert logged_in.load().token == "tok-1"


def test_login_network_error_is_not_masked(store, platform):
    platform.with_error("get_user_info", PlatformError("NETWORK_ERROR", "refused"))
    with pytest.raises(ZaiaError) as exc:
        login(store, platform, "tok", "h", "prg1")
    assert exc.value.code == "NETWORK_ERROR"


def test_login_project_listing_failure(store, platform):
    platform.with_error("list_projects", PlatformError("API_ERROR", "boom"))
    with pytest.raises(ZaiaError) as exc:
        login(store, platform, "tok", "h", "prg1")
    assert exc.value.code == "AUTH_API_ERROR"
    assert "boom" in exc.value.message


def test_store_path_is_used_verbatim(tmp_path):
    store = CredentialStore(tmp_path / "nested" / "creds.data")
    store.save(StoredData(token="t"))
    assert (tmp_path / "nested" / "creds.data").exists()
