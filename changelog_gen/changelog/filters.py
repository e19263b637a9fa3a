"""Changelog Filters - Drop noise and collapse duplicate entries."""

import re

from changelog_gen.changelog.models import ChangelogEntry, RenderedLine

# Matched against the lower-cased, trimmed description. Kept short on
# purpose: anything not listed here goes into the changelog.
EXCLUDE_PATTERNS: list[re.Pattern] = [
    re.compile(r'^merge '),
    re.compile(r'found \d+ staged files'),
    re.compile(r'generating ai commit message'),
    re.compile(r'ai message generated'),
    re.compile(r'^wip$'),
    re.compile(r'^temp$'),
    re.compile(r'^tmp$'),
    re.compile(r'^\w+\.\w+$'),
    re.compile(r'^(update|fix|add|remove|change|delete|create|test|debug)$'),
]

_WHITESPACE_RE = re.compile(r'\s+')
_BULLET_RE = re.compile(r'^-\s*')
_SCOPE_MARKER_RE = re.compile(r'\*\*[^*]+\*\*:\s*')
_TASK_ID_RE = re.compile(r'task\s*(?:id)?\s*:\s*')
_TICKET_RE = re.compile(r'dev-\d+[,\s]*')


def is_changelog_worthy(entry: ChangelogEntry) -> bool:
    description = entry.description.lower().strip()
    return not any(pattern.search(description) for pattern in EXCLUDE_PATTERNS)


def filter_entries(entries: list[ChangelogEntry]) -> list[ChangelogEntry]:
    return [e for e in entries if is_changelog_worthy(e)]


def normalize_description(description: str) -> str:
    return _WHITESPACE_RE.sub(' ', description.lower()).strip()


def normalize_line(content: str) -> str:
    """Normalize a rendered line so differently formatted copies compare equal.

    Drops the bullet, the bold scope marker and ticket prefixes before
    comparing, so `- foo`, `**api**: foo` and `**api**: DEV-12 foo` collide.
    """
    text = content.lower().strip()
    text = _BULLET_RE.sub('', text, count=1)
    text = _SCOPE_MARKER_RE.sub('', text, count=1)
    text = _TASK_ID_RE.sub('', text, count=1)
    text = _TICKET_RE.sub('', text, count=1)
    return _WHITESPACE_RE.sub(' ', text).strip()


def dedupe_entries(entries: list[ChangelogEntry]) -> list[ChangelogEntry]:
    """Keep one entry per (type, scope, description); the longer description wins."""
    seen: dict[tuple[str, str, str], ChangelogEntry] = {}
    for entry in entries:
        key = (entry.type.value, entry.scope or '', normalize_description(entry.description))
        existing = seen.get(key)
        if existing is None or len(entry.description) > len(existing.description):
            seen[key] = entry
    return list(seen.values())


def dedupe_lines(lines: list[RenderedLine]) -> list[RenderedLine]:
    """Keep one line per (section, normalized text); the longer line wins."""
    seen: dict[tuple[str, str], RenderedLine] = {}
    for line in lines:
        key = (line.section, normalize_line(line.content))
        existing = seen.get(key)
        if existing is None or len(line.content) > len(existing.content):
            seen[key] = line
    return list(seen.values())
