"""Shared test fixtures and utilities."""

from pathlib import Path

import pytest

from svcs.context import RepositoryContext
from svcs.config import write_author
from svcs.ops import append_to_index


@pytest.fixture
def repo(tmp_path, monkeypatch):
    """Create an initialized repository in tmp_path and chdir into it."""
    monkeypatch.chdir(tmp_path)
    ctx = RepositoryContext.init(tmp_path)
    write_author(ctx, "tester")
    return ctx


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content="test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def track(repo):
    """Factory fixture to append paths to the persisted index."""
    def _track(*paths):
        for path in paths:
            append_to_index(repo, Path(path).as_posix())
    return _track


@pytest.fixture
def commit(repo):
    """Factory fixture to commit with the tester author."""
    from svcs.commit_store import CommitStore

    def _commit(message: str = "test commit"):
        return CommitStore(repo).commit(message, "tester")
    return _commit
