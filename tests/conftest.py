"""Shared fixtures: an in-memory commit history standing in for git."""

import pytest

from changelog_gen.git import CommitRecord, CommitSource, GitError


class FakeCommitSource(CommitSource):
    """Linear history kept in a list, oldest first."""

    def __init__(self, messages=()):
        self.commits: list[CommitRecord] = []
        self.calls: list[tuple] = []
        for message in messages:
            self.commit(message)

    def commit(self, message: str) -> str:
        commit_hash = f"{len(self.commits) + 1:040x}"
        self.commits.append(CommitRecord(hash=commit_hash, message=message))
        return commit_hash

    def get_commits(self, since=None, limit=None):
        self.calls.append((since, limit))
        if since is None:
            return list(self.commits if limit is None else self.commits[-limit:])
        hashes = [c.hash for c in self.commits]
        if since not in hashes:
            raise GitError(f"Git command failed: git log {since}..HEAD\nfatal: bad revision")
        return self.commits[hashes.index(since) + 1:]

    def get_head_hash(self):
        if not self.commits:
            raise GitError("Git command failed: git rev-parse HEAD")
        return self.commits[-1].hash


@pytest.fixture
def make_source():
    """Return a factory that builds a FakeCommitSource from commit subjects."""
    def _make(*messages):
        return FakeCommitSource(messages)
    return _make


@pytest.fixture
def changelog_path(tmp_path):
    return tmp_path / "CHANGELOG.md"
