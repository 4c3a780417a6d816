"""Integration tests for CLI commands that verify real workflows.

Most tests run in-process through CliRunner. One real subprocess test
verifies the packaging/__main__ path.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from svcs import api
from svcs.cli import app
from svcs.context import RepositoryContext


# ========== Fixtures ==========

@pytest.fixture
def runner():
    """Create a CliRunner for in-process testing."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory; the CLI creates the repository on first use."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _commit_ids(root: Path):
    return [entry.commit_id for entry in api.log_entries(RepositoryContext(root))]


# ========== Command Tests ==========

class TestConfig:

    def test_unset_username(self, runner, workdir):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Please, tell me who you are." in result.output
        assert (workdir / "vcs").is_dir()

    def test_set_and_show_username(self, runner, workdir):
        result = runner.invoke(app, ["config", "Ada"])
        assert result.exit_code == 0
        assert "The username is Ada." in result.output

        result = runner.invoke(app, ["config"])
        assert "The username is Ada." in result.output


class TestAdd:

    def test_list_when_empty(self, runner, workdir):
        result = runner.invoke(app, ["add"])
        assert result.exit_code == 0
        assert "Add a file to the index." in result.output

    def test_add_and_list(self, runner, workdir):
        (workdir / "a.txt").write_text("hello")
        (workdir / "b.txt").write_text("world")

        result = runner.invoke(app, ["add", "a.txt", "b.txt"])
        assert result.exit_code == 0
        assert "The file 'a.txt' is tracked." in result.output
        assert "The file 'b.txt' is tracked." in result.output

        result = runner.invoke(app, ["add"])
        assert result.output.splitlines() == ["Tracked files:", "a.txt", "b.txt"]

    def test_missing_file(self, runner, workdir):
        result = runner.invoke(app, ["add", "nope.txt"])
        assert result.exit_code == 1
        assert "Can't find 'nope.txt'." in result.output
        assert (workdir / "vcs" / "index").read_text() == ""

    def test_missing_file_does_not_block_others(self, runner, workdir):
        (workdir / "a.txt").write_text("hello")

        result = runner.invoke(app, ["add", "nope.txt", "a.txt"])

        assert result.exit_code == 1
        assert "The file 'a.txt' is tracked." in result.output
        assert (workdir / "vcs" / "index").read_text() == "a.txt\n"

    def test_ignored_file_hint(self, runner, workdir):
        (workdir / "mod.pyc").write_bytes(b"\x00")

        result = runner.invoke(app, ["add", "mod.pyc"])
        assert result.exit_code == 0
        assert "ignored" in result.output
        assert "--force" in result.output

        result = runner.invoke(app, ["add", "--force", "mod.pyc"])
        assert "The file 'mod.pyc' is tracked." in result.output


class TestCommitAndLog:

    def test_empty_log(self, runner, workdir):
        result = runner.invoke(app, ["log"])
        assert result.exit_code == 0
        assert "No commits yet." in result.output

    def test_commit_without_message(self, runner, workdir):
        (workdir / "a.txt").write_text("hello")
        runner.invoke(app, ["add", "a.txt"])

        for args in (["commit"], ["commit", "   "], ["commit", '""']):
            result = runner.invoke(app, args)
            assert result.exit_code == 1
            assert "Message was not passed." in result.output

        assert (workdir / "vcs" / "log").read_text() == ""

    def test_commit_with_nothing_tracked(self, runner, workdir):
        result = runner.invoke(app, ["commit", "first"])
        assert result.exit_code == 1
        assert "Nothing to commit." in result.output

    def test_commit_then_log(self, runner, workdir):
        runner.invoke(app, ["config", "Ada"])
        (workdir / "a.txt").write_text("hello")
        runner.invoke(app, ["add", "a.txt"])

        result = runner.invoke(app, ["commit", "Added", "greeting"])
        assert result.exit_code == 0
        assert "Changes are committed." in result.output

        result = runner.invoke(app, ["commit", "again"])
        assert result.exit_code == 1
        assert "Nothing to commit." in result.output

        (workdir / "a.txt").write_text("hello!")
        result = runner.invoke(app, ["commit", '"Changed greeting"'])
        assert result.exit_code == 0

        first, second = reversed(_commit_ids(workdir))
        result = runner.invoke(app, ["log"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            f"commit {second}",
            "Author: Ada",
            "Changed greeting",
            "",
            f"commit {first}",
            "Author: Ada",
            "Added greeting",
        ]


class TestCheckout:

    def test_checkout_without_id(self, runner, workdir):
        result = runner.invoke(app, ["checkout"])
        assert result.exit_code == 1
        assert "Commit id was not passed." in result.output

    def test_checkout_unknown_id(self, runner, workdir):
        result = runner.invoke(app, ["checkout", "deadbeef"])
        assert result.exit_code == 1
        assert "Commit does not exist." in result.output

    def test_checkout_restores_earlier_commit(self, runner, workdir):
        (workdir / "a.txt").write_text("hello")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "only a"])
        (workdir / "b.txt").write_text("world")
        runner.invoke(app, ["add", "b.txt"])
        runner.invoke(app, ["commit", "a and b"])

        first = _commit_ids(workdir)[-1]
        result = runner.invoke(app, ["checkout", first])

        assert result.exit_code == 0
        assert f"Switched to commit {first}." in result.output
        assert not (workdir / "b.txt").exists()
        assert (workdir / "a.txt").read_text() == "hello"

        result = runner.invoke(app, ["add"])
        assert result.output.splitlines() == ["Tracked files:", "a.txt"]


def test_no_arguments_shows_help_and_succeeds(runner, workdir):
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "checkout" in result.output
    assert "commit" in result.output


# ========== One Real Subprocess E2E Test (marked slow) ==========

@pytest.mark.slow
@pytest.mark.integration
def test_cli_real_subprocess_e2e(tmp_path, monkeypatch):
    """One true E2E test using subprocess to verify packaging/__main__ path.

    This is marked @pytest.mark.slow and @pytest.mark.integration.
    It can be excluded from normal runs with: pytest -m "not slow"
    """
    monkeypatch.chdir(tmp_path)
    Path("file1.txt").write_text("content1")

    base_env = {
        **os.environ,
        "PYTHONDONTWRITEBYTECODE": "1",  # Skip .pyc writes for speed
    }

    commands = [
        [sys.executable, "-m", "svcs", "config", "tester"],
        [sys.executable, "-m", "svcs", "add", "file1.txt"],
        [sys.executable, "-m", "svcs", "commit", "first"],
        [sys.executable, "-m", "svcs", "log"],
    ]

    for cmd in commands:
        result = subprocess.run(cmd, capture_output=True, text=True, env=base_env)
        assert result.returncode == 0, f"Command {' '.join(cmd)} failed: {result.stderr}"

    assert "Author: tester" in result.stdout
    assert len(_commit_ids(tmp_path)) == 1
