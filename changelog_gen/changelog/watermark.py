"""Watermark - The last processed commit, embedded in the changelog.

The changelog carries a pair of HTML comments after the Unreleased block:

    <!-- Generated: 2026-01-01T12:00:00.000Z Commit: <hash> -->
    <!-- CI-LAST-PROCESSED: <hash> -->

The CI-LAST-PROCESSED hash is the lower bound of the next run. It is the
only state kept between runs.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

from changelog_gen.changelog.merge import find_unreleased

LAST_PROCESSED_RE = re.compile(r'<!-- CI-LAST-PROCESSED: ([a-f0-9]+) -->')
_GENERATED_COMMENT_RE = re.compile(r'<!-- Generated:.*?-->\n?')
_PROCESSED_COMMENT_RE = re.compile(r'<!-- CI-LAST-PROCESSED:.*?-->\n?')
_BLANK_LINES_RE = re.compile(r'\n{3,}')


@dataclass(frozen=True)
class Watermark:
    last_processed: str | None = None


def read_watermark(document: str | None) -> Watermark:
    if not document:
        return Watermark()
    match = LAST_PROCESSED_RE.search(document)
    return Watermark(last_processed=match.group(1) if match else None)


def strip_watermarks(document: str) -> str:
    """Remove every watermark comment, stale copies included."""
    text = _GENERATED_COMMENT_RE.sub('', document)
    text = _PROCESSED_COMMENT_RE.sub('', text)
    return _BLANK_LINES_RE.sub('\n\n', text).strip()


def format_timestamp(when: datetime | None = None) -> str:
    when = when or datetime.now(timezone.utc)
    return when.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def format_watermark(commit_hash: str, timestamp: str) -> str:
    return (
        f"<!-- Generated: {timestamp} Commit: {commit_hash} -->\n"
        f"<!-- CI-LAST-PROCESSED: {commit_hash} -->"
    )


def stamp_watermark(document: str, commit_hash: str, timestamp: str | None = None) -> str:
    """Replace all watermark comments with one fresh pair after the Unreleased block.

    Without an Unreleased block the pair goes at the end of the document.
    """
    cleaned = strip_watermarks(document)
    watermark = format_watermark(commit_hash, timestamp or format_timestamp())

    block = find_unreleased(cleaned)
    if block is None:
        head, tail = cleaned, ''
    else:
        head, tail = cleaned[:block.end], cleaned[block.end:]

    parts = [head.rstrip(), watermark]
    if tail.strip():
        parts.append(tail.strip('\n'))
    return '\n\n'.join(p for p in parts if p) + '\n'
