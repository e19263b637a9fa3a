"""Changelog Data Model"""

from dataclasses import dataclass, field
from enum import Enum


class CommitType(str, Enum):
    """Conventional commit types recognized by the changelog."""
    FEAT = 'feat'
    FIX = 'fix'
    DOCS = 'docs'
    STYLE = 'style'
    REFACTOR = 'refactor'
    PERF = 'perf'
    TEST = 'test'
    CHORE = 'chore'
    CI = 'ci'
    BUILD = 'build'
    SECURITY = 'security'


# Section title per type. Dict order is the order sections are rendered in.
SECTION_TITLES: dict[CommitType, str] = {
    CommitType.FEAT: 'Added',
    CommitType.FIX: 'Fixed',
    CommitType.PERF: 'Performance',
    CommitType.SECURITY: 'Security',
    CommitType.REFACTOR: 'Changed',
    CommitType.DOCS: 'Documentation',
    CommitType.TEST: 'Testing',
    CommitType.CHORE: 'Maintenance',
    CommitType.CI: 'CI/CD',
    CommitType.BUILD: 'Build',
    CommitType.STYLE: 'Code Style',
}

SECTION_ORDER: list[str] = list(SECTION_TITLES.values())

COMMIT_TYPE_NAMES: list[str] = [t.value for t in CommitType]


@dataclass(frozen=True)
class ChangelogEntry:
    """A parsed commit on its way into the changelog."""
    type: CommitType
    description: str
    scope: str | None = None
    hash: str = ""

    @property
    def section_title(self) -> str:
        return SECTION_TITLES[self.type]


@dataclass
class ChangelogSection:
    """Entries sharing a section title, e.g. all "Fixed" entries."""
    title: str
    entries: list[ChangelogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedLine:
    """A rendered entry line and the section it belongs to."""
    section: str
    content: str
