"""File I/O for the index and the commit log.

Every write goes through ``_atomic_write_text`` so a crash leaves either the
old or the new file, never a torn one. There is no in-memory caching: each
load reads the file again.
"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional

import portalocker

from .context import RepositoryContext
from .core import CommitLog, TrackedIndex
from .errors import RepositoryLockedError

logger = logging.getLogger(__name__)


# ============= Atomic Write Helpers =============

def _fsync_dir(path: Path) -> None:
    """Fsync a directory so renames inside it are durable (best-effort)."""
    try:
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY
        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        # Windows and some filesystems do not support directory fsync
        logger.debug("Directory fsync not supported for %s", path)


def _atomic_write_bytes(path: Path, data: bytes, mode: int = 0o644) -> None:
    """Atomically write bytes to ``path``.

    1. Write to a temp file in the same directory and fsync it
    2. Atomic rename over the target
    3. Fsync the parent directory so the rename is durable

    The result gets ``mode``; temp files are created owner-only.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
        suffix=""
    ) as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)

    try:
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)


def _atomic_write_text(path: Path, text: str) -> None:
    """Atomically write UTF-8 text to ``path``."""
    _atomic_write_bytes(path, text.encode("utf-8"))


# ============= Repository Lock =============

@contextlib.contextmanager
def repository_lock(ctx: RepositoryContext, timeout: Optional[float] = None) -> Iterator[None]:
    """Hold the exclusive repository lock for the duration of a mutating command.

    Args:
        ctx: Repository context
        timeout: Seconds to wait for the lock (defaults to settings.lock_timeout)

    Raises:
        RepositoryLockedError: If the lock cannot be acquired in time
    """
    if timeout is None:
        from .config import load_settings
        timeout = load_settings(ctx).lock_timeout

    lock = portalocker.Lock(str(ctx.lock_path), "a", timeout=timeout)
    try:
        lock.acquire()
    except portalocker.LockException:
        raise RepositoryLockedError(str(ctx.lock_path), timeout)
    try:
        yield
    finally:
        lock.release()


# ============= Index =============

def load_index(ctx: RepositoryContext) -> TrackedIndex:
    """Load the tracked paths in insertion order."""
    if not ctx.index_path.exists():
        return TrackedIndex()
    return TrackedIndex.from_text(ctx.index_path.read_text(encoding="utf-8"))


def save_index(index: TrackedIndex, ctx: RepositoryContext) -> None:
    """Save the index atomically, preserving order and duplicates."""
    _atomic_write_text(ctx.index_path, index.to_text())


def append_to_index(ctx: RepositoryContext, path: str) -> TrackedIndex:
    """Append one path to the persisted index and return the new index."""
    index = load_index(ctx)
    index.append(path)
    save_index(index, ctx)
    return index


# ============= Commit Log =============

def load_log(ctx: RepositoryContext) -> CommitLog:
    """Load the commit log, most recent entry first."""
    if not ctx.log_path.exists():
        return CommitLog()
    return CommitLog.from_text(ctx.log_path.read_text(encoding="utf-8"))


def save_log(log: CommitLog, ctx: RepositoryContext) -> None:
    """Save the commit log atomically.

    Raises:
        LogFormatError: If an entry cannot be serialized (nothing is written)
    """
    _atomic_write_text(ctx.log_path, log.to_text())
