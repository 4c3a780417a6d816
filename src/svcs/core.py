"""Core data models for svcs.

Persisted formats are plain text (one record per line). The models here are
the structured form; serialization to and from text happens only through
``to_line``/``from_line`` and ``to_text``/``from_text``.
"""

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .constants import LOG_ENTRY_SEPARATOR
from .errors import IntegrityError, LogFormatError


# ============= Configuration =============

class RepositorySettings(BaseModel):
    """Repository settings (stored in vcs/settings.yaml)."""

    model_config = ConfigDict(extra="forbid")

    digest_cache: bool = False
    lock_timeout: float = Field(default=10.0, gt=0)


# ============= File Tracking =============

class TrackedIndex(BaseModel):
    """Ordered list of tracked paths (stored in vcs/index).

    Order is insertion order and duplicates are kept: the order fixes the
    bytes fed into commit id derivation.
    """

    paths: List[str] = Field(default_factory=list)

    def list(self) -> List[str]:
        """Tracked paths in insertion order."""
        return list(self.paths)

    def append(self, path: str) -> None:
        """Track ``path`` at the end of the index (no deduplication)."""
        self.paths.append(path)

    def replace(self, paths: Sequence[str]) -> None:
        """Replace the whole index."""
        self.paths = list(paths)

    def unique(self) -> set:
        return set(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)

    def to_text(self) -> str:
        return "".join(f"{path}\n" for path in self.paths)

    @classmethod
    def from_text(cls, text: str) -> "TrackedIndex":
        return cls(paths=[line for line in text.splitlines() if line.strip()])


class FileInfo(BaseModel):
    """Digest of a single tracked file."""

    path: str
    digest: str


# ============= Commit Log =============

_FORBIDDEN_IN_FIELDS = (LOG_ENTRY_SEPARATOR, "\n", "\r")


class LogEntry(BaseModel):
    """One commit record: (commit id, author, message)."""

    commit_id: str
    author: str
    message: str

    def to_line(self) -> str:
        """Serialize as ``commitId:::author:::message``.

        Raises:
            LogFormatError: If author or message would break the line format
        """
        for field, value in (("author", self.author), ("message", self.message)):
            if any(token in value for token in _FORBIDDEN_IN_FIELDS):
                raise LogFormatError(field, value, _FORBIDDEN_IN_FIELDS)
        return LOG_ENTRY_SEPARATOR.join((self.commit_id, self.author, self.message))

    @classmethod
    def from_line(cls, line: str) -> "LogEntry":
        """Parse a log line; the message keeps any text after the second separator."""
        parts = line.split(LOG_ENTRY_SEPARATOR, 2)
        if len(parts) != 3:
            raise IntegrityError(f"Malformed log entry: {line!r}")
        commit_id, author, message = parts
        return cls(commit_id=commit_id, author=author, message=message)


class CommitLog(BaseModel):
    """Commit log, most recent entry first (stored in vcs/log)."""

    entries: List[LogEntry] = Field(default_factory=list)

    @property
    def latest(self) -> Optional[LogEntry]:
        return self.entries[0] if self.entries else None

    @property
    def commit_ids(self) -> List[str]:
        return [entry.commit_id for entry in self.entries]

    def prepend(self, entry: LogEntry) -> None:
        """Record a new commit ahead of all existing ones."""
        self.entries.insert(0, entry)

    def contains(self, commit_id: str) -> bool:
        return commit_id in self.commit_ids

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def to_text(self) -> str:
        return "".join(f"{entry.to_line()}\n" for entry in self.entries)

    @classmethod
    def from_text(cls, text: str) -> "CommitLog":
        return cls(entries=[LogEntry.from_line(line) for line in text.splitlines() if line.strip()])


# ============= Change Detection =============

class ChangeReason(str, Enum):
    """Why the change detector reached its decision."""

    EMPTY_INDEX = "empty_index"
    FIRST_COMMIT = "first_commit"
    FILE_SET_CHANGED = "file_set_changed"
    CONTENT_CHANGED = "content_changed"
    UNCHANGED = "unchanged"


# ============= Results =============

class CheckoutResult(BaseModel):
    """Outcome of restoring a snapshot."""

    commit_id: str
    removed: List[str] = Field(default_factory=list)
    restored: List[str] = Field(default_factory=list)
