"""Digest caching for change detection.

Uses SQLite for persistence with (path, size, mtime_ns, inode) as cache key,
so any rewrite that touches size, mtime or inode invalidates the entry.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Tuple

from .hashing import compute_file_digest

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, int, int, int]


class DigestCache:
    """Cache working-file digests keyed by stat info."""

    def __init__(self, cache_path: Path):
        """Initialize cache with database path.

        Args:
            cache_path: Path to SQLite database file
        """
        self.cache_path = cache_path
        self._init_database()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.cache_path))

    def _init_database(self):
        """Initialize SQLite schema."""
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS digest_cache (
                    path TEXT NOT NULL,
                    size INTEGER NOT NULL,
                    mtime_ns INTEGER NOT NULL,
                    inode INTEGER NOT NULL,
                    digest TEXT NOT NULL,
                    PRIMARY KEY (path, size, mtime_ns, inode)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_path ON digest_cache(path)
            """)
            conn.commit()
        finally:
            conn.close()

    def get_or_compute(self, path: Path) -> str:
        """Get cached digest or compute if not cached.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        stat = path.stat()
        cache_key = (str(path.resolve()), stat.st_size, stat.st_mtime_ns, stat.st_ino)

        cached = self._lookup(cache_key)
        if cached:
            logger.debug("Digest cache hit: %s", path)
            return cached

        digest = compute_file_digest(path)
        self._store(cache_key, digest)
        return digest

    def _lookup(self, cache_key: CacheKey) -> Optional[str]:
        conn = self._connect()
        try:
            cursor = conn.execute(
                "SELECT digest FROM digest_cache WHERE path = ? AND size = ? AND mtime_ns = ? AND inode = ?",
                cache_key,
            )
            row = cursor.fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def _store(self, cache_key: CacheKey, digest: str):
        """Store a digest, dropping older entries for the same path."""
        conn = self._connect()
        try:
            conn.execute("DELETE FROM digest_cache WHERE path = ?", (cache_key[0],))
            conn.execute(
                """
                INSERT OR REPLACE INTO digest_cache (path, size, mtime_ns, inode, digest)
                VALUES (?, ?, ?, ?, ?)
                """,
                cache_key + (digest,),
            )
            conn.commit()
        finally:
            conn.close()

    def clear_stale(self) -> int:
        """Remove entries for files that no longer exist. Returns the number removed."""
        conn = self._connect()
        try:
            paths = [row[0] for row in conn.execute("SELECT DISTINCT path FROM digest_cache")]
            stale_paths = [p for p in paths if not Path(p).exists()]

            if stale_paths:
                placeholders = ",".join("?" * len(stale_paths))
                conn.execute(
                    f"DELETE FROM digest_cache WHERE path IN ({placeholders})",
                    stale_paths,
                )
                conn.commit()
            return len(stale_paths)
        finally:
            conn.close()

    def clear(self):
        conn = self._connect()
        try:
            conn.execute("DELETE FROM digest_cache")
            conn.commit()
        finally:
            conn.close()
