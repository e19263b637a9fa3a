"""Changelog Renderer - Group entries into sections and write Markdown."""

import re

from changelog_gen.changelog.models import SECTION_ORDER, ChangelogEntry, ChangelogSection, RenderedLine

# Entries shorter than this after cleanup say nothing useful
MIN_ENTRY_LENGTH = 10

_LEADING_VERB_RE = re.compile(r'^(add|fix|update|remove)\s+', re.IGNORECASE)
# A filename is dropped only when no word follows it ("in utils.py" vs "utils.py handler")
_FILENAME_RE = re.compile(
    r'\b[\w-]+\.(ts|js|tsx|jsx|json|yaml|yml|md|txt)\b(?!\s+\w)',
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r'\s+')
_EDGE_PUNCTUATION_RE = re.compile(r'^[,\-\s]+|[,\-\s]+$')
_ACRONYM_RE = re.compile(r'^[A-Z]{2,}')
_SECTION_HEADING_RE = re.compile(r'^###[ \t]+(.+)$', re.MULTILINE)


def group_entries(entries: list[ChangelogEntry]) -> list[ChangelogSection]:
    """Group entries by section title, in fixed section order, skipping empty ones."""
    grouped: dict[str, list[ChangelogEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.section_title, []).append(entry)

    return [
        ChangelogSection(title=title, entries=grouped[title])
        for title in SECTION_ORDER
        if grouped.get(title)
    ]


def clean_description(description: str) -> str:
    text = _LEADING_VERB_RE.sub('', description)
    text = _FILENAME_RE.sub('', text)
    text = _WHITESPACE_RE.sub(' ', text).strip()
    text = _EDGE_PUNCTUATION_RE.sub('', text)

    if text and not _ACRONYM_RE.match(text):
        text = text[0].lower() + text[1:]
    return text


def render_entry(entry: ChangelogEntry, min_length: int = MIN_ENTRY_LENGTH) -> str | None:
    """Render one entry line, or None when too little is left after cleanup.

    Scoped entries are written without a bullet. Existing changelogs rely on
    this format, so keep it as is.
    """
    description = clean_description(entry.description)
    if len(description) < min_length:
        return None
    if entry.scope:
        return f"**{entry.scope}**: {description}"
    return f"- {description}"


def render_section(title: str, lines: list[str]) -> str:
    return f"### {title}\n\n" + '\n'.join(lines)


def render_sections(sections: list[ChangelogSection], min_length: int = MIN_ENTRY_LENGTH) -> str:
    """Render sections to Markdown. Sections with no surviving entries are left out."""
    rendered = []
    for section in sections:
        lines = [line for line in (render_entry(e, min_length) for e in section.entries) if line]
        if lines:
            rendered.append(render_section(section.title, lines))
    return '\n\n'.join(rendered)


def render_lines(lines: list[RenderedLine]) -> str:
    """Regroup already-rendered lines by section.

    Known sections come first in fixed order; sections with other titles
    follow in the order they were first seen.
    """
    grouped: dict[str, list[str]] = {}
    for line in lines:
        grouped.setdefault(line.section, []).append(line.content)

    titles = [t for t in SECTION_ORDER if t in grouped]
    titles += [t for t in grouped if t not in SECTION_ORDER]
    return '\n\n'.join(render_section(title, grouped[title]) for title in titles)


def parse_rendered_lines(content: str) -> list[RenderedLine]:
    """Read `### Title` sections back into (section, entry line) pairs.

    Entry lines are bullets (`- ...`) and scoped lines (`**scope**: ...`).
    Text before the first heading and other lines are ignored.
    """
    parts = _SECTION_HEADING_RE.split(content)
    lines = []
    # split() with one group gives [before, title, body, title, body, ...]
    for i in range(1, len(parts), 2):
        title = parts[i].strip()
        if not title:
            continue
        for raw in parts[i + 1].split('\n'):
            line = raw.strip()
            if line.startswith('-') or line.startswith('**'):
                lines.append(RenderedLine(section=title, content=line))
    return lines
