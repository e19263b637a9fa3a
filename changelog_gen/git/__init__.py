"""Git Operations Package"""

from changelog_gen.git.base import CommitRecord, CommitSource, GitError
from changelog_gen.git.analyzer import GitAnalyzer, parse_log_output

__all__ = [
    "CommitRecord",
    "CommitSource",
    "GitError",
    "GitAnalyzer",
    "parse_log_output",
]
