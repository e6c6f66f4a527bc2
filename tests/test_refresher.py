import os

import pytest

from conftest import FakeRunner
from errors import CloneError, RefreshError, SyncError, WorkspaceError
from refresher import SiteRefresher
from utils import CommandResult


def test_refresh_clones_then_syncs():
    runner = FakeRunner()
    SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")

    assert runner.programs() == ["git", "rsync"]

    clone_command, clone_cwd = runner.calls[0]
    tmp_dir = clone_command[-1]
    assert clone_command == ["git", "clone", "--depth", "1", "--branch", "main", "https://example.com/site.git", tmp_dir]
    assert os.path.basename(tmp_dir).startswith("website-files")
    assert clone_cwd is None

    sync_command, sync_cwd = runner.calls[1]
    assert sync_command == ["rsync", "-c", "-r", "--delete", "--exclude=.well-known", "web/", "/srv/a"]
    assert sync_cwd == tmp_dir


def test_clone_failure_skips_sync():
    runner = FakeRunner(results={"git": CommandResult(128, "", "fatal: Remote branch nope not found")})

    with pytest.raises(CloneError) as excinfo:
        SiteRefresher(run=runner).refresh("https://example.com/site.git", "nope", "/srv/a")

    assert runner.programs() == ["git"]
    assert excinfo.value.returncode == 128
    assert "Remote branch nope not found" in excinfo.value.stderr


def test_sync_failure_is_distinct_from_clone_failure():
    runner = FakeRunner(results={"rsync": CommandResult(23, "partial", "some files vanished")})

    with pytest.raises(SyncError) as excinfo:
        SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")

    assert not isinstance(excinfo.value, CloneError)
    assert isinstance(excinfo.value, RefreshError)
    assert excinfo.value.returncode == 23
    assert excinfo.value.stdout == "partial"


def test_failed_commands_log_captured_output(caplog):
    runner = FakeRunner(results={"git": CommandResult(1, "clone stdout", "clone stderr")})

    with pytest.raises(CloneError):
        SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")

    assert "Error cloning from git" in caplog.text
    assert "clone stdout" in caplog.text
    assert "clone stderr" in caplog.text


def test_missing_git_binary_is_clone_error():
    def run(command, cwd=None):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    with pytest.raises(CloneError):
        SiteRefresher(run=run).refresh("https://example.com/site.git", "main", "/srv/a")


def test_missing_rsync_binary_is_sync_error():
    def run(command, cwd=None):
        if command[0] == "rsync":
            raise FileNotFoundError(2, "No such file or directory", command[0])
        return CommandResult(0, "", "")

    with pytest.raises(SyncError):
        SiteRefresher(run=run).refresh("https://example.com/site.git", "main", "/srv/a")


def populate_checkout(command, cwd):
    if command[0] == "git":
        checkout = command[-1]
        os.makedirs(os.path.join(checkout, "web"))
        with open(os.path.join(checkout, "web", "index.html"), "w") as f:
            f.write("<h1>hi</h1>")


def test_populated_checkout_is_removed_after_success():
    runner = FakeRunner(on_run=populate_checkout)
    SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")

    tmp_dir = runner.calls[0][0][-1]
    assert not os.path.exists(tmp_dir)


def test_populated_checkout_is_removed_after_failure():
    runner = FakeRunner(results={"rsync": CommandResult(1, "", "")}, on_run=populate_checkout)
    with pytest.raises(SyncError):
        SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")

    tmp_dir = runner.calls[0][0][-1]
    assert not os.path.exists(tmp_dir)


def test_temp_dir_failure_is_workspace_error(monkeypatch):
    def fail(*args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("refresher.tempfile.TemporaryDirectory", fail)
    runner = FakeRunner()

    with pytest.raises(WorkspaceError):
        SiteRefresher(run=runner).refresh("https://example.com/site.git", "main", "/srv/a")
    assert runner.calls == []
