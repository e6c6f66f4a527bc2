"""Shared fixtures and fakes for sitehook tests."""

import json

import pytest
from fastapi.testclient import TestClient

from errors import CloneError
from main import create_app
from models.site_config import BranchConfig, SiteConfig
from notifications import Notifications
from rate_limit import RateLimiter
from utils import CommandResult


class FakeClock:
    def __init__(self, current: float = 1_700_000_000.0):
        self.current = current

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class FakeRunner:
    """Stands in for utils.run_command; results are keyed by program name."""

    def __init__(self, results=None, on_run=None):
        self.results = results or {}
        self.on_run = on_run
        self.calls = []

    def __call__(self, command, cwd=None):
        self.calls.append((list(command), cwd))
        if self.on_run:
            self.on_run(command, cwd)
        return self.results.get(command[0], CommandResult(0, "", ""))

    def programs(self):
        return [command[0] for command, _ in self.calls]


class FakeRefresher:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def refresh(self, git_url, branch, target_dir):
        self.calls.append((git_url, branch, target_dir))
        if self.error:
            raise self.error


class RecordingNotifier(Notifications):
    def __init__(self):
        super().__init__()
        self.events = []

    def notify_refresh_event(self, branch, target_dir, status, details=""):
        self.events.append((branch, target_dir, status))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def site_config():
    return SiteConfig(
        git_url="https://example.com/site.git",
        port="8080",
        branch_configs=[
            BranchConfig(branch="main", target_dir="/srv/a"),
            BranchConfig(branch="dev", target_dir="/srv/b"),
            BranchConfig(branch="main", target_dir="/srv/duplicate"),
        ],
    )


@pytest.fixture
def refresher():
    return FakeRefresher()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(interval=10, now_fn=clock.now)


@pytest.fixture
def client(site_config, rate_limiter, refresher, notifier):
    app = create_app(site_config, rate_limiter=rate_limiter, refresher=refresher, notifier=notifier)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def write_config(tmp_path):
    def _write(content):
        path = tmp_path / "config.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return str(path)
    return _write


@pytest.fixture
def clone_failure():
    return CloneError("git clone failed", returncode=128, stderr="fatal: repository not found")
