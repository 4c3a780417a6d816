"""Change detection between the index and the most recent commit."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .context import RepositoryContext
from .core import ChangeReason, CommitLog, TrackedIndex
from .ops import load_index, load_log
from .snapshot import CommitSnapshot, Digester, list_snapshot_ids, make_digester

logger = logging.getLogger(__name__)


@dataclass
class ChangeReport:
    """Decision of the change detector and the evidence behind it."""

    reason: ChangeReason
    latest_commit: Optional[str] = None
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)

    @property
    def should_commit(self) -> bool:
        return self.reason not in (ChangeReason.EMPTY_INDEX, ChangeReason.UNCHANGED)


def detect_changes(
    ctx: RepositoryContext,
    index: Optional[TrackedIndex] = None,
    log: Optional[CommitLog] = None,
    digester: Optional[Digester] = None,
) -> ChangeReport:
    """
    Decide whether committing now would record anything new.

    Rules are checked in order and the first match decides:

    1. Nothing tracked -> no commit
    2. No commit recorded yet (empty log or no snapshots) -> commit
    3. Tracked path set differs from the latest snapshot's file set -> commit
    4. Any tracked file's content differs from its stored copy -> commit
    5. Otherwise -> no commit

    Content is only hashed when rules 1-3 leave the answer open, and hashing
    stops at the first differing file.
    """
    index = index if index is not None else load_index(ctx)
    log = log if log is not None else load_log(ctx)

    if not index:
        return ChangeReport(ChangeReason.EMPTY_INDEX)

    if not log or not list_snapshot_ids(ctx):
        return ChangeReport(ChangeReason.FIRST_COMMIT)

    latest = CommitSnapshot(ctx, log.latest.commit_id)
    if not latest.exists():
        logger.warning("Snapshot for latest commit %s is missing", latest.commit_id)

    committed = set(latest.file_names())
    indexed = index.unique()
    if committed != indexed:
        return ChangeReport(
            ChangeReason.FILE_SET_CHANGED,
            latest_commit=latest.commit_id,
            added=sorted(indexed - committed),
            removed=sorted(committed - indexed),
        )

    digester = digester or make_digester(ctx)
    for name in sorted(committed):
        working = ctx.absolute(name)
        if not working.is_file():
            logger.debug("Tracked file %s is missing from the working directory", name)
            return ChangeReport(ChangeReason.CONTENT_CHANGED, latest_commit=latest.commit_id, modified=[name])
        if digester(working) != latest.digest_of(name):
            return ChangeReport(ChangeReason.CONTENT_CHANGED, latest_commit=latest.commit_id, modified=[name])

    return ChangeReport(ChangeReason.UNCHANGED, latest_commit=latest.commit_id)


def should_commit(ctx: RepositoryContext) -> bool:
    """True when a commit would differ from the most recent one."""
    return detect_changes(ctx).should_commit
