"""Repository context for managing paths and repository discovery."""

import logging
from pathlib import Path
from typing import Optional, Union

from .constants import (
    COMMITS_DIR,
    CONFIG_FILE,
    DIGEST_CACHE_FILE,
    INDEX_FILE,
    LOCK_FILE,
    LOG_FILE,
    SETTINGS_FILE,
    SVCS_DIR,
)
from .errors import PathOutsideRepositoryError, RepositoryNotFoundError
from .ignore import IgnoreSpec

logger = logging.getLogger(__name__)


class RepositoryContext:
    """Owns the repository root and the locations of all persisted state.

    Every component receives a context explicitly; nothing in svcs reads the
    current directory on its own.
    """

    def __init__(self, start_path: Optional[Path] = None):
        """Initialize context by finding the repository root.

        Args:
            start_path: Directory to start searching from (defaults to CWD)

        Raises:
            RepositoryNotFoundError: If no marker directory is found
        """
        start = Path(start_path) if start_path is not None else Path.cwd()
        self.root = self._find_root(start)
        if not self.root:
            raise RepositoryNotFoundError(str(start), SVCS_DIR)
        self._ignore_spec: Optional[IgnoreSpec] = None

    @classmethod
    def is_initialized(cls, path: Optional[Path] = None) -> bool:
        """Check if a specific directory is initialized (without traversing up)."""
        target = path or Path.cwd()
        return (target / SVCS_DIR).is_dir()

    @classmethod
    def init(cls, path: Optional[Path] = None) -> "RepositoryContext":
        """Create the marker directory and its empty artifacts at ``path``.

        Existing artifacts are left untouched, so this is safe to call on an
        initialized repository.
        """
        target = Path(path) if path is not None else Path.cwd()
        marker = target / SVCS_DIR
        marker.mkdir(parents=True, exist_ok=True)
        (marker / COMMITS_DIR).mkdir(exist_ok=True)
        for name in (INDEX_FILE, CONFIG_FILE, LOG_FILE):
            artifact = marker / name
            if not artifact.exists():
                artifact.touch()
        logger.debug("Initialized repository at %s", target)
        return cls(target)

    @classmethod
    def ensure(cls, path: Optional[Path] = None) -> "RepositoryContext":
        """Open the enclosing repository, creating one in ``path`` if none exists."""
        target = Path(path) if path is not None else Path.cwd()
        try:
            ctx = cls(target)
        except RepositoryNotFoundError:
            return cls.init(target)
        # Repair missing artifacts in an existing repository
        return cls.init(ctx.root)

    def _find_root(self, start: Path) -> Optional[Path]:
        """Walk up directory tree to find repository root."""
        current = start.resolve()

        while current != current.parent:
            if (current / SVCS_DIR).is_dir():
                return current
            current = current.parent

        # Check root directory
        if (current / SVCS_DIR).is_dir():
            return current
        return None

    def resolve(self, path: Union[str, Path]) -> str:
        """Convert a path (absolute or relative to CWD) to a repository-relative POSIX string.

        Raises:
            PathOutsideRepositoryError: If the path is not inside the repository
        """
        p = Path(path)
        absolute = p if p.is_absolute() else Path.cwd() / p
        try:
            return absolute.resolve().relative_to(self.root).as_posix()
        except ValueError:
            raise PathOutsideRepositoryError(str(path))

    def absolute(self, repo_path: Union[str, Path]) -> Path:
        """Get absolute path from repository-relative path."""
        return self.root / repo_path

    @property
    def storage_dir(self) -> Path:
        """Get the repository marker directory."""
        return self.root / SVCS_DIR

    @property
    def config_path(self) -> Path:
        """Get path to the author config file."""
        return self.storage_dir / CONFIG_FILE

    @property
    def index_path(self) -> Path:
        """Get path to the index file."""
        return self.storage_dir / INDEX_FILE

    @property
    def log_path(self) -> Path:
        """Get path to the commit log."""
        return self.storage_dir / LOG_FILE

    @property
    def commits_dir(self) -> Path:
        """Get path to the snapshot directory root."""
        return self.storage_dir / COMMITS_DIR

    @property
    def settings_path(self) -> Path:
        return self.storage_dir / SETTINGS_FILE

    @property
    def digest_cache_path(self) -> Path:
        return self.storage_dir / DIGEST_CACHE_FILE

    @property
    def lock_path(self) -> Path:
        return self.storage_dir / LOCK_FILE

    def is_internal(self, relpath: str) -> bool:
        """Check if a repository-relative path lies inside the marker directory."""
        return relpath == SVCS_DIR or relpath.startswith(f"{SVCS_DIR}/")

    def get_ignore_spec(self) -> IgnoreSpec:
        """Get the ignore specification (memoized)."""
        if self._ignore_spec is None:
            self._ignore_spec = IgnoreSpec(self.root)
        return self._ignore_spec

    def should_ignore(self, relpath: Union[str, Path]) -> bool:
        """Check if a repository-relative path should be ignored."""
        if isinstance(relpath, Path):
            relpath = relpath.as_posix()
        return self.get_ignore_spec().is_ignored(relpath)
