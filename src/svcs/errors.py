"""Custom exceptions for svcs.

Every user-facing failure is a subclass of ``SvcsError`` so the CLI can report
it as a single status line. Raw ``OSError``s from the filesystem are not
wrapped and propagate as fatal failures of the current command.
"""

from typing import Sequence


class SvcsError(RuntimeError):
    """Base class for all svcs errors."""
    pass


# Not-found Errors
class NotFoundError(SvcsError):
    """Referenced file or commit does not exist."""
    pass


class PathNotFoundError(NotFoundError):
    """Path passed to add does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Can't find '{path}'.")


class CommitNotFoundError(NotFoundError):
    """Commit id is not recorded in the log."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__("Commit does not exist.")


class TrackedFileMissingError(NotFoundError):
    """A tracked file disappeared from the working directory before commit."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Tracked file '{path}' is missing from the working directory. "
            f"Restore it or check out a previous commit before committing."
        )


# Precondition Errors
class PreconditionError(SvcsError):
    """Operation refused; no state was mutated."""
    pass


class EmptyIndexError(PreconditionError):
    """Nothing is tracked."""

    def __init__(self):
        super().__init__("Nothing to commit.")


class NothingToCommitError(PreconditionError):
    """Tracked files are identical to the latest commit."""

    def __init__(self):
        super().__init__("Nothing to commit.")


class EmptyMessageError(PreconditionError):
    """Commit message is missing or blank after trimming."""

    def __init__(self):
        super().__init__("Message was not passed.")


class MissingCommitIdError(PreconditionError):
    """Checkout invoked without a commit id."""

    def __init__(self):
        super().__init__("Commit id was not passed.")


class PathOutsideRepositoryError(PreconditionError):
    """Path resolves outside the repository root."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path {path} is outside the repository")


# Integrity Errors
class IntegrityError(SvcsError):
    """Base class for data integrity errors."""
    pass


class CommitCollisionError(IntegrityError):
    """A snapshot for the derived commit id exists but holds other content."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(
            f"Snapshot {commit_id[:12]}... already exists with different content. "
            f"The commit store is inconsistent."
        )


class LogFormatError(IntegrityError):
    """A log field cannot be serialized without corrupting the log."""

    def __init__(self, field: str, value: str, forbidden: Sequence[str]):
        self.field = field
        self.value = value
        shown = ", ".join(repr(f) for f in forbidden)
        super().__init__(f"Commit {field} must not contain {shown}: {value!r}")


class DigestMismatchError(IntegrityError):
    """Stored copy does not match the digest computed for the working file."""

    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Digest verification failed for {path}\n"
            f"  Expected: {expected}\n"
            f"  Got:      {actual}\n"
            f"The file changed while it was being committed."
        )


# Configuration Errors
class ConfigError(SvcsError):
    """Repository settings could not be loaded."""
    pass


class RepositoryLockedError(SvcsError):
    """Another svcs process holds the repository lock."""

    def __init__(self, lock_path: str, timeout: float):
        self.lock_path = lock_path
        self.timeout = timeout
        super().__init__(
            f"Repository is locked by another svcs process ({lock_path}). "
            f"Gave up after {timeout:g}s."
        )


class RepositoryNotFoundError(NotFoundError):
    """No marker directory found in the start directory or its parents."""

    def __init__(self, start: str, marker: str):
        self.start = start
        super().__init__(f"Not inside an svcs repository (no {marker}/ found above {start})")
