"""svcs: a small local version control system.

Tracks a chosen set of files, stores full snapshots of them under a
content-derived commit id, and restores any earlier snapshot.
"""

from .constants import SVCS_VERSION as __version__
from .context import RepositoryContext
from .hashing import compute_commit_id, compute_file_digest, digest

__all__ = [
    "__version__",
    "RepositoryContext",
    "compute_commit_id",
    "compute_file_digest",
    "digest",
]
