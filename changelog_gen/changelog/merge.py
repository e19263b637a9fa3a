"""Changelog Merge - Fold newly rendered sections into the Unreleased block."""

import re
from dataclasses import dataclass

from changelog_gen.changelog.filters import dedupe_lines
from changelog_gen.changelog.renderer import parse_rendered_lines, render_lines

UNRELEASED_HEADING = '## [Unreleased]'

INITIAL_CHANGELOG = """# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).

## [Unreleased]

"""

_UNRELEASED_RE = re.compile(r'^## \[Unreleased\][^\n]*', re.MULTILINE)
_RELEASE_HEADING_RE = re.compile(r'^## ', re.MULTILINE)
_WATERMARK_COMMENT_RE = re.compile(r'<!-- (?:Generated|CI-LAST-PROCESSED):.*?-->')


@dataclass(frozen=True)
class UnreleasedBlock:
    """Offsets of the Unreleased block: heading start, body start, block end."""
    start: int
    body_start: int
    end: int


def find_unreleased(document: str) -> UnreleasedBlock | None:
    """Locate `## [Unreleased]`; the block runs until the next `## ` heading."""
    heading = _UNRELEASED_RE.search(document)
    if heading is None:
        return None
    next_heading = _RELEASE_HEADING_RE.search(document, heading.end())
    end = next_heading.start() if next_heading else len(document)
    return UnreleasedBlock(start=heading.start(), body_start=heading.end(), end=end)


def merge_sections(existing: str, new_content: str) -> str:
    """Union of two rendered section bodies, deduplicated and regrouped."""
    existing_lines = parse_rendered_lines(existing)
    if not existing_lines:
        # Nothing readable in the old body; start the block over
        return new_content
    return render_lines(dedupe_lines(existing_lines + parse_rendered_lines(new_content)))


def merge_unreleased(document: str, new_content: str) -> str:
    """Merge rendered sections into the document's Unreleased block.

    - no Unreleased block: insert one before the first release heading
      (or at the end) holding just the new content
    - empty block, or only an old watermark in it: replace the body
    - block with entries: merge old and new entries without duplicates

    Watermark comments are left alone here; stamp_watermark() rewrites them.
    """
    block = find_unreleased(document)

    if block is None:
        release = _RELEASE_HEADING_RE.search(document)
        if release is None:
            head = document.rstrip()
            unreleased = f"{UNRELEASED_HEADING}\n\n{new_content}\n"
            return f"{head}\n\n{unreleased}" if head else unreleased
        head = document[:release.start()].rstrip()
        tail = document[release.start():]
        unreleased = f"{UNRELEASED_HEADING}\n\n{new_content}\n\n"
        return f"{head}\n\n{unreleased}{tail}" if head else f"{unreleased}{tail}"

    heading = document[block.start:block.body_start].rstrip()
    body = document[block.body_start:block.end]
    existing = _WATERMARK_COMMENT_RE.sub('', body).strip()
    merged = merge_sections(existing, new_content) if existing else new_content

    return (
        f"{document[:block.start]}{heading}\n\n{merged}\n\n"
        f"{document[block.end:]}"
    )
