"""Commit Source Base Classes"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CommitRecord:
    """One commit in the processed range: full hash and subject line."""
    hash: str
    message: str


class GitError(Exception):
    """Raised when git operations fail."""
    pass


class CommitSource(ABC):
    """Read-only view of commit history used by the changelog generator."""

    @abstractmethod
    def get_commits(self, since: str | None = None, limit: int | None = None) -> list[CommitRecord]:
        """Return commits in (since, HEAD], oldest first, merges excluded.

        With no `since`, return the last `limit` commits, or the whole
        history when there are fewer than `limit` (or `limit` is None).
        """
        pass

    @abstractmethod
    def get_head_hash(self) -> str:
        """Return the object id HEAD points at."""
        pass
