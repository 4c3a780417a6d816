"""Commit snapshot storage.

A commit is published in two steps:

1. Stage: copy every tracked file into a private directory inside the marker
   directory, fsync each copy and verify its digest.
2. Publish: rename the staged directory to ``commits/<commit_id>`` and only
   then prepend the log entry.

A failure before the rename leaves no trace in ``commits/`` or the log. A
failure writing the log removes the just-published snapshot again, so the log
never names a snapshot that is missing or incomplete.

Committing content identical to an earlier commit (a revert) reuses that
snapshot after checking its digests and only adds a new log entry.
"""

import contextlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from .constants import STAGING_PREFIX
from .context import RepositoryContext
from .core import LogEntry
from .errors import CommitCollisionError, DigestMismatchError, EmptyIndexError, NothingToCommitError
from .hashing import compute_file_digest
from .ops import _fsync_dir, load_index, load_log, save_log
from .snapshot import (
    CommitSnapshot,
    Digester,
    TrackedFilesSnapshot,
    make_digester,
)
from .working_state import detect_changes

logger = logging.getLogger(__name__)


def _fsync_file(path: Path) -> None:
    with open(path, "r+b") as f:
        os.fsync(f.fileno())


class CommitStore:
    """Creates and reads commit snapshots for one repository."""

    def __init__(self, ctx: RepositoryContext, digester: Optional[Digester] = None):
        self.ctx = ctx
        self._digester = digester

    @property
    def digester(self) -> Digester:
        if self._digester is None:
            self._digester = make_digester(self.ctx)
        return self._digester

    def snapshot(self, commit_id: str) -> CommitSnapshot:
        return CommitSnapshot(self.ctx, commit_id)

    def commit(self, message: str, author: Optional[str]) -> LogEntry:
        """Snapshot the tracked files and record the commit.

        Args:
            message: Normalized, non-blank commit message
            author: Author name; ``None`` is recorded as an empty string

        Returns:
            The new log entry

        Raises:
            EmptyIndexError: Nothing is tracked
            NothingToCommitError: Tracked files equal the latest commit
            TrackedFileMissingError: A tracked file is gone from disk
            LogFormatError: Author or message cannot be stored in the log
            CommitCollisionError: A stored snapshot with this id holds other content
        """
        ctx = self.ctx
        index = load_index(ctx)
        if not index:
            raise EmptyIndexError()

        log = load_log(ctx)
        report = detect_changes(ctx, index=index, log=log, digester=self.digester)
        if not report.should_commit:
            raise NothingToCommitError()
        logger.debug("Committing (%s)", report.reason.value)

        scan = TrackedFilesSnapshot.scan(index.list(), ctx.root, self.digester)
        entry = LogEntry(commit_id=scan.commit_id, author=author or "", message=message)
        # Validate serialization before anything touches the disk
        entry.to_line()

        expected = {f.path: f.digest for f in scan.files}
        existing = self.snapshot(entry.commit_id)
        reused = existing.exists()
        if reused:
            # Same content as an earlier commit, e.g. a revert
            if not self._matches(existing, expected):
                raise CommitCollisionError(entry.commit_id)
            logger.debug("Reusing snapshot %s", entry.commit_id)
        else:
            staged = self._stage(expected)
            self._publish(staged, existing.directory)

        try:
            log.prepend(entry)
            save_log(log, ctx)
        except BaseException:
            if not reused:
                logger.debug("Log update failed, removing snapshot %s", entry.commit_id)
                shutil.rmtree(existing.directory, ignore_errors=True)
            raise

        logger.debug("Committed %s (%d files)", entry.commit_id, len(expected))
        return entry

    @staticmethod
    def _matches(snapshot: CommitSnapshot, expected: Dict[str, str]) -> bool:
        """Check that a stored snapshot holds exactly the expected files and digests."""
        if set(snapshot.file_names()) != set(expected):
            return False
        return all(snapshot.digest_of(name) == digest for name, digest in expected.items())

    def _stage(self, expected: Dict[str, str]) -> Path:
        """Copy tracked files into a fresh staging directory and verify them."""
        ctx = self.ctx
        staged = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=ctx.storage_dir))
        try:
            for name, digest in expected.items():
                dest = staged / name
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(ctx.absolute(name), dest)
                _fsync_file(dest)
                actual = compute_file_digest(dest)
                if actual != digest:
                    raise DigestMismatchError(name, digest, actual)
                logger.debug("Staged %s", name)
        except BaseException:
            shutil.rmtree(staged, ignore_errors=True)
            raise
        return staged

    def _publish(self, staged: Path, target: Path) -> None:
        """Atomically move a staged snapshot into ``commits/``."""
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(str(staged), str(target))
        except BaseException:
            with contextlib.suppress(OSError):
                shutil.rmtree(staged)
            raise
        _fsync_dir(target.parent)
        logger.debug("Published snapshot %s", target.name)
