"""Stable API for svcs operations.

These functions are what the CLI calls. Each one takes an explicit
``RepositoryContext`` and holds the repository lock while it mutates state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .checkout import checkout_commit
from .commit_store import CommitStore
from .config import read_author, write_author
from .context import RepositoryContext
from .core import CheckoutResult, LogEntry
from .errors import PathNotFoundError
from .ops import load_index, load_log, repository_lock, save_index
from .utils import normalize_message


@dataclass
class AddResult:
    """Paths tracked (and skipped) by one ``add`` call."""

    added: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)


def open_repository(path: Optional[Path] = None) -> RepositoryContext:
    """Open the repository enclosing ``path`` (or CWD), creating one if needed."""
    return RepositoryContext.ensure(path)


def get_author(ctx: RepositoryContext) -> Optional[str]:
    return read_author(ctx)


def set_author(ctx: RepositoryContext, name: str) -> None:
    with repository_lock(ctx):
        write_author(ctx, name)


def tracked_files(ctx: RepositoryContext) -> List[str]:
    """Tracked paths in index order."""
    return load_index(ctx).list()


def add_path(ctx: RepositoryContext, path: Union[str, Path], force: bool = False) -> AddResult:
    """Track a file, or every file below a directory.

    Paths are stored relative to the repository root. Ignored paths are
    skipped unless ``force`` is set. Tracking a path twice records it twice.

    Raises:
        PathNotFoundError: If ``path`` does not exist
        PathOutsideRepositoryError: If ``path`` is outside the repository
    """
    p = Path(path)
    if not p.exists():
        raise PathNotFoundError(str(path))

    result = AddResult()
    if p.is_dir():
        candidates = [ctx.resolve(item) for item in sorted(p.rglob("*")) if item.is_file()]
        candidates = [c for c in candidates if not ctx.is_internal(c)]
    else:
        candidates = [ctx.resolve(p)]

    for rel_path in candidates:
        if ctx.is_internal(rel_path) or (not force and ctx.should_ignore(rel_path)):
            result.ignored.append(rel_path)
            continue
        result.added.append(rel_path)

    if result.added:
        with repository_lock(ctx):
            index = load_index(ctx)
            for rel_path in result.added:
                index.append(rel_path)
            save_index(index, ctx)

    return result


def log_entries(ctx: RepositoryContext) -> List[LogEntry]:
    """Commit log, most recent first."""
    return load_log(ctx).entries


def commit(ctx: RepositoryContext, message: str) -> LogEntry:
    """Commit the tracked files with ``message``.

    The message is normalized first; see ``normalize_message``.

    Raises:
        EmptyMessageError, EmptyIndexError, NothingToCommitError,
        TrackedFileMissingError, LogFormatError, CommitCollisionError
    """
    message = normalize_message(message)
    with repository_lock(ctx):
        return CommitStore(ctx).commit(message, read_author(ctx))


def checkout(ctx: RepositoryContext, commit_id: Optional[str]) -> CheckoutResult:
    """Restore the working files and index to ``commit_id``.

    Raises:
        MissingCommitIdError: If ``commit_id`` is empty
        CommitNotFoundError: If ``commit_id`` is not in the log
    """
    with repository_lock(ctx):
        return checkout_commit(ctx, commit_id or "")
