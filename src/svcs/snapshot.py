"""Tracked-file scans and stored commit snapshots."""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pydantic import BaseModel, Field

from .config import load_settings
from .context import RepositoryContext
from .core import FileInfo
from .digest_cache import DigestCache
from .errors import TrackedFileMissingError
from .hashing import compute_commit_id, compute_file_digest

logger = logging.getLogger(__name__)

Digester = Callable[[Path], str]


def make_digester(ctx: RepositoryContext) -> Digester:
    """Return the function used to digest working files.

    With ``digest_cache: true`` in settings the SQLite cache is consulted;
    otherwise every call re-reads and re-hashes the file.
    """
    if load_settings(ctx).digest_cache:
        return DigestCache(ctx.digest_cache_path).get_or_compute
    return compute_file_digest


class TrackedFilesSnapshot(BaseModel):
    """
    Digests of the tracked working files, in index order.

    This is the expensive operation - computes SHA256 for every entry.
    Duplicate index entries appear once per occurrence.
    """

    files: List[FileInfo] = Field(default_factory=list)

    @classmethod
    def scan(
        cls,
        tracked: Sequence[str],
        root: Path,
        digester: Optional[Digester] = None,
    ) -> "TrackedFilesSnapshot":
        """Digest every tracked path under ``root``.

        Raises:
            TrackedFileMissingError: If a tracked path is not a file on disk
        """
        digester = digester or compute_file_digest
        files = []
        for path_str in tracked:
            path = root / path_str
            if not path.is_file():
                raise TrackedFileMissingError(path_str)
            files.append(FileInfo(path=path_str, digest=digester(path)))
        return cls(files=files)

    @property
    def digests(self) -> List[str]:
        return [f.digest for f in self.files]

    @property
    def commit_id(self) -> str:
        """Commit id these files would be stored under."""
        return compute_commit_id(self.digests)


class CommitSnapshot:
    """Read access to the stored files of one commit."""

    def __init__(self, ctx: RepositoryContext, commit_id: str):
        self.ctx = ctx
        self.commit_id = commit_id
        self.directory = ctx.commits_dir / commit_id

    def exists(self) -> bool:
        return self.directory.is_dir()

    def file_names(self) -> List[str]:
        """Sorted repository-relative POSIX names of every stored file."""
        if not self.exists():
            return []
        return sorted(
            p.relative_to(self.directory).as_posix()
            for p in self.directory.rglob("*")
            if p.is_file()
        )

    def path_of(self, name: str) -> Path:
        return self.directory / name

    def digest_of(self, name: str) -> str:
        return compute_file_digest(self.path_of(name))

    def read_bytes(self, name: str) -> bytes:
        return self.path_of(name).read_bytes()


def list_snapshot_ids(ctx: RepositoryContext) -> List[str]:
    """Names of all published snapshot directories."""
    if not ctx.commits_dir.is_dir():
        return []
    return sorted(
        p.name for p in ctx.commits_dir.iterdir()
        if p.is_dir() and not p.name.startswith(".")
    )
