"""Restore a commit snapshot into the working directory.

Checkout is not atomic: tracked files are deleted first and the
snapshot is restored afterwards. An I/O error part way through leaves the
working directory mixed and is reported to the caller as-is.
"""

import logging

from .context import RepositoryContext
from .core import CheckoutResult
from .errors import CommitNotFoundError, MissingCommitIdError
from .ops import _atomic_write_bytes, load_index, load_log, save_index
from .snapshot import CommitSnapshot

logger = logging.getLogger(__name__)


def commit_exists(ctx: RepositoryContext, commit_id: str) -> bool:
    """Check whether ``commit_id`` is recorded in the log."""
    return load_log(ctx).contains(commit_id)


def checkout(ctx: RepositoryContext, commit_id: str) -> CheckoutResult:
    """Replace the tracked working files with the snapshot of ``commit_id``.

    The commit is assumed to exist; use ``checkout_commit`` for the checked
    variant.

    Steps:
        1. Delete every file named in the current index (missing files are fine)
        2. Write every stored file back into the working directory
        3. Replace the index with the snapshot's file names, sorted
    """
    snapshot = CommitSnapshot(ctx, commit_id)
    names = snapshot.file_names()
    index = load_index(ctx)

    removed = []
    for path_str in dict.fromkeys(index.list()):
        working = ctx.absolute(path_str)
        if working.is_file():
            working.unlink()
            removed.append(path_str)
            logger.debug("Removed %s", path_str)

    for name in names:
        _atomic_write_bytes(ctx.absolute(name), snapshot.read_bytes(name))
        logger.debug("Restored %s from %s", name, commit_id)

    index.replace(names)
    save_index(index, ctx)

    return CheckoutResult(commit_id=commit_id, removed=removed, restored=names)


def checkout_commit(ctx: RepositoryContext, commit_id: str) -> CheckoutResult:
    """Validate ``commit_id`` against the log, then check it out.

    Raises:
        MissingCommitIdError: If no commit id was supplied
        CommitNotFoundError: If the id is not recorded in the log
    """
    if not commit_id:
        raise MissingCommitIdError()
    if not commit_exists(ctx, commit_id):
        raise CommitNotFoundError(commit_id)
    return checkout(ctx, commit_id)
