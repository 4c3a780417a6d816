"""Tests for the SQLite digest cache."""

import os
from unittest.mock import patch

from svcs.core import ChangeReason
from svcs.digest_cache import DigestCache
from svcs.hashing import compute_file_digest, digest
from svcs.snapshot import make_digester
from svcs.working_state import detect_changes


class TestDigestCache:

    def test_computes_on_miss(self, tmp_path):
        cache = DigestCache(tmp_path / "digests.db")
        target = tmp_path / "a.txt"
        target.write_text("hello")

        assert cache.get_or_compute(target) == digest(b"hello")

    def test_hit_skips_hashing(self, tmp_path):
        cache = DigestCache(tmp_path / "digests.db")
        target = tmp_path / "a.txt"
        target.write_text("hello")
        cache.get_or_compute(target)

        with patch("svcs.digest_cache.compute_file_digest") as mock_compute:
            assert cache.get_or_compute(target) == digest(b"hello")
            mock_compute.assert_not_called()

    def test_rewrite_invalidates_entry(self, tmp_path):
        cache = DigestCache(tmp_path / "digests.db")
        target = tmp_path / "a.txt"
        target.write_text("hello")
        cache.get_or_compute(target)

        target.write_text("hello, world")
        stat = target.stat()
        os.utime(target, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000))

        assert cache.get_or_compute(target) == digest(b"hello, world")

    def test_persists_across_instances(self, tmp_path):
        target = tmp_path / "a.txt"
        target.write_text("hello")
        DigestCache(tmp_path / "digests.db").get_or_compute(target)

        with patch("svcs.digest_cache.compute_file_digest") as mock_compute:
            DigestCache(tmp_path / "digests.db").get_or_compute(target)
            mock_compute.assert_not_called()

    def test_clear_stale(self, tmp_path):
        cache = DigestCache(tmp_path / "digests.db")
        keep = tmp_path / "keep.txt"
        gone = tmp_path / "gone.txt"
        keep.write_text("keep")
        gone.write_text("gone")
        cache.get_or_compute(keep)
        cache.get_or_compute(gone)
        gone.unlink()

        assert cache.clear_stale() == 1
        assert cache.clear_stale() == 0

    def test_clear(self, tmp_path):
        cache = DigestCache(tmp_path / "digests.db")
        target = tmp_path / "a.txt"
        target.write_text("hello")
        cache.get_or_compute(target)
        cache.clear()

        with patch("svcs.digest_cache.compute_file_digest", return_value="0" * 64) as mock_compute:
            assert cache.get_or_compute(target) == "0" * 64
            mock_compute.assert_called_once()


class TestCacheSetting:

    def test_disabled_by_default(self, repo):
        assert make_digester(repo) is compute_file_digest
        assert not repo.digest_cache_path.exists()

    def test_enabled_by_setting(self, repo, write_file, track, commit):
        repo.settings_path.write_text("digest_cache: true\n")
        write_file("a.txt", "hello")
        track("a.txt")

        commit("first")
        assert repo.digest_cache_path.exists()
        assert detect_changes(repo).reason == ChangeReason.UNCHANGED

        write_file("a.txt", "hello again")
        assert detect_changes(repo).reason == ChangeReason.CONTENT_CHANGED
