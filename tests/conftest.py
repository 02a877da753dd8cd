import io
import json

import pytest
from click.testing import CliRunner

from fakes import FakeLogFetcher, InMemoryPlatform, make_service

from zaia_cli.auth import CredentialStore, ProjectRef, RegionData, StoredData, UserRef
from zaia_cli.cli import cli
from zaia_cli.config import CLISettings
from zaia_cli.types import Project


@pytest.fixture
def platform():
    return (
        InMemoryPlatform()
        .with_projects(Project(id="proj-1", name="my-project", status="ACTIVE"))
        .with_services(
            make_service("svc-api", "api", "nodejs@22"),
            make_service("svc-db", "db", "postgresql@16"),
        )
    )


@pytest.fixture
def log_fetcher():
    return FakeLogFetcher()


@pytest.fixture
def settings(tmp_path):
    return CLISettings(data_file_path=tmp_path / "zaia.data")


@pytest.fixture
def store(settings):
    return CredentialStore(settings.data_file_path)


@pytest.fixture
def logged_in(store):
    store.save(
        StoredData(
            token="tok-1",
            api_host="api.app-prg1.zerops.io",
            region_data=RegionData(name="prg1", is_default=True, address="api.app-prg1.zerops.io"),
            project=ProjectRef(id="proj-1", name="my-project"),
            user=UserRef(name="Test User", email="test@example.com"),
        )
    )
    return store


class Invocation:
    def __init__(self, result):
        self.result = result
        self.exit_code = result.exit_code
        self.output = result.stdout

    @property
    def payload(self):
        return json.loads(self.output)


@pytest.fixture
def invoke(platform, log_fetcher, settings, store):
    """Run the CLI in-process against the in-memory platform."""

    def run(*args: str) -> Invocation:
        obj = {
            "settings": settings,
            "store": store,
            "client": platform,
            "log_fetcher": log_fetcher,
        }
        result = CliRunner().invoke(cli, list(args), obj=obj)
        return Invocation(result)

    return run


@pytest.fixture
def sink():
    return io.StringIO()
