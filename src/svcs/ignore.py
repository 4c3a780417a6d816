"""Gitignore-style pattern matching for svcs."""

from pathlib import Path
from typing import Iterable

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern

from .constants import IGNORE_FILE, SVCS_DIR


# Default patterns to always ignore
DEFAULTS = [
    # Repository metadata
    f"{SVCS_DIR}/",
    ".git/",
    ".hg/",
    ".svn/",

    # Python
    "__pycache__/",
    "*.pyc",
    "*.pyo",

    # Virtual environments
    "venv/",
    ".venv/",

    # Editors and OS files
    "*.swp",
    "*~",
    ".DS_Store",
    "Thumbs.db",
]


class IgnoreSpec:
    """Manages gitignore-style patterns for file exclusion."""

    def __init__(self, root: Path, extra: Iterable[str] = ()):
        """Initialize ignore spec with default and custom patterns.

        Args:
            root: Repository root directory
            extra: Additional patterns to include
        """
        self.root = root
        patterns = list(DEFAULTS)

        # Load repository-specific ignore file if it exists
        ignore_file = root / IGNORE_FILE
        if ignore_file.exists():
            for line in ignore_file.read_text().splitlines():
                line = line.strip()
                if line and not line.startswith("#"):
                    patterns.append(line)

        patterns.extend(extra)

        self.spec = PathSpec.from_lines(GitWildMatchPattern, patterns)

    def is_ignored(self, relpath: str) -> bool:
        """Check if a repository-relative POSIX path should be ignored."""
        return self.spec.match_file(relpath)

