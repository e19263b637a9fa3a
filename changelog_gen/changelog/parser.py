"""Conventional Commit Parser"""

import re

from changelog_gen.changelog.models import COMMIT_TYPE_NAMES, ChangelogEntry, CommitType
from changelog_gen.git import CommitRecord

CONVENTIONAL_RE = re.compile(
    rf'^({"|".join(COMMIT_TYPE_NAMES)})(?:\(([^)]+)\))?: (.+)$'
)

# Checked in order; first group with a keyword in the message wins
TYPE_KEYWORDS: list[tuple[tuple[str, ...], CommitType]] = [
    (('fix', 'bug', 'error'), CommitType.FIX),
    (('test', 'spec'), CommitType.TEST),
    (('doc', 'readme'), CommitType.DOCS),
    (('refactor', 'cleanup'), CommitType.REFACTOR),
    (('performance', 'optimize'), CommitType.PERF),
    (('security', 'vulnerability'), CommitType.SECURITY),
    (('ci', 'pipeline', 'workflow'), CommitType.CI),
    (('dependency', 'deps', 'version'), CommitType.CHORE),
]


def infer_commit_type(message: str) -> CommitType:
    """Guess a type for a message that isn't in conventional format."""
    lower = message.lower()
    for keywords, commit_type in TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return commit_type
    return CommitType.FEAT


def parse_commit_message(message: str, commit_hash: str = "") -> ChangelogEntry:
    """Parse a commit subject into a changelog entry. Never fails.

    `type(scope): description` is taken apart as-is. Anything else keeps the
    whole message as description with a type inferred from keywords.
    """
    match = CONVENTIONAL_RE.match(message)
    if match and match.group(3).strip():
        return ChangelogEntry(
            type=CommitType(match.group(1)),
            scope=match.group(2) or None,
            description=match.group(3),
            hash=commit_hash,
        )

    return ChangelogEntry(
        type=infer_commit_type(message),
        scope=None,
        description=message,
        hash=commit_hash,
    )


def parse_commits(commits: list[CommitRecord]) -> list[ChangelogEntry]:
    return [parse_commit_message(c.message, c.hash) for c in commits]
