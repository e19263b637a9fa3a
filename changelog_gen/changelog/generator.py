"""Changelog Generator - Turn new commits into an updated CHANGELOG.md.

Each run reads the watermark left by the previous run, collects the commits
made since then, renders them into sections and merges those into the
Unreleased block. The write happens once, after the final text is built.
"""

import os
import stat
import tempfile
from pathlib import Path
from typing import Callable

from changelog_gen import DEFAULT_CHANGELOG, DEFAULT_COMMIT_LIMIT
from changelog_gen.changelog.filters import dedupe_entries, filter_entries
from changelog_gen.changelog.merge import INITIAL_CHANGELOG, merge_unreleased
from changelog_gen.changelog.parser import parse_commits
from changelog_gen.changelog.renderer import MIN_ENTRY_LENGTH, group_entries, render_sections
from changelog_gen.changelog.watermark import Watermark, read_watermark, stamp_watermark
from changelog_gen.git import CommitRecord, CommitSource, GitError


class ChangelogError(Exception):
    """Raised when a changelog run cannot complete."""
    pass


def render_commits(commits: list[CommitRecord], min_length: int = MIN_ENTRY_LENGTH) -> str:
    """Commits -> Markdown sections. Empty string when nothing is worth listing."""
    entries = dedupe_entries(filter_entries(parse_commits(commits)))
    return render_sections(group_entries(entries), min_length)


def update_document(
    document: str,
    new_content: str,
    head_hash: str,
    timestamp: str | None = None,
) -> tuple[str, Watermark]:
    """Merge new sections into the document and move the watermark to head_hash."""
    merged = merge_unreleased(document, new_content)
    return stamp_watermark(merged, head_hash, timestamp), Watermark(last_processed=head_hash)


class ChangelogGenerator:
    """Keeps a changelog file in sync with commit history."""

    def __init__(
        self,
        source: CommitSource,
        changelog_path: str | Path = DEFAULT_CHANGELOG,
        commit_limit: int = DEFAULT_COMMIT_LIMIT,
        min_entry_length: int = MIN_ENTRY_LENGTH,
        log: Callable[[str], None] | None = None,
    ):
        self.source = source
        self.changelog_path = Path(changelog_path)
        self.commit_limit = commit_limit
        self.min_entry_length = min_entry_length
        self._log = log or (lambda message: None)

    def generate(self, preview: bool = False, since: str | None = None) -> str | None:
        """Run one update.

        Args:
            preview: Return the new sections without touching the file
            since: Commit to start after, instead of the stored watermark

        Returns:
            The new sections (preview) or the full updated document, or None
            when there is nothing new to add.
        """
        self._log("Analyzing commits since last run...")

        document, newline = self._read_document()
        watermark = read_watermark(document)
        commits = self._get_commits(since or watermark.last_processed)

        if not commits:
            self._log("No new commits to process")
            return None

        self._log(f"Processing {len(commits)} commits...")
        new_content = render_commits(commits, self.min_entry_length)

        if not new_content.strip():
            self._log("No significant changes to document")
            return None

        if preview:
            return new_content

        try:
            head_hash = self.source.get_head_hash()
        except GitError as e:
            raise ChangelogError(f"Failed to read HEAD: {e}")

        if document is None:
            self._log(f"Creating {self.changelog_path}")
            document = INITIAL_CHANGELOG

        final, _ = update_document(document, new_content, head_hash)
        self._write_document(final, newline)
        self._log(f"Changelog updated (last processed: {head_hash[:12]})")
        return final

    def _get_commits(self, since: str | None) -> list[CommitRecord]:
        if since:
            self._log(f"Starting after commit {since}")
        else:
            self._log(f"No previous run found, reading up to {self.commit_limit} recent commits")
        try:
            commits = self.source.get_commits(since=since, limit=None if since else self.commit_limit)
        except GitError as e:
            raise ChangelogError(f"Failed to get commits: {e}")
        self._log(f"Found {len(commits)} new commits")
        return commits

    def _read_document(self) -> tuple[str | None, str]:
        """Return the document with LF line endings, and the file's own line ending."""
        if not self.changelog_path.exists():
            return None, '\n'
        try:
            with open(self.changelog_path, 'r', encoding='utf-8', newline='') as f:
                raw = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ChangelogError(f"Could not read {self.changelog_path}: {e}")
        newline = '\r\n' if '\r\n' in raw else '\n'
        return raw.replace('\r\n', '\n'), newline

    def _file_mode(self) -> int:
        """Mode for the new file: the old file's, else what open() would give."""
        try:
            return stat.S_IMODE(os.stat(self.changelog_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def _write_document(self, content: str, newline: str = '\n') -> None:
        """Write through a temp file in the same directory, then swap it in."""
        directory = self.changelog_path.parent
        try:
            tmp = tempfile.NamedTemporaryFile(
                mode='w', dir=directory, prefix=f'.{self.changelog_path.name}.',
                suffix='.tmp', delete=False, encoding='utf-8', newline=newline,
            )
        except OSError as e:
            raise ChangelogError(f"Could not write {self.changelog_path}: {e}")

        try:
            with tmp:
                tmp.write(content)
            # NamedTemporaryFile is always 0600
            os.chmod(tmp.name, self._file_mode())
            os.replace(tmp.name, self.changelog_path)
        except OSError as e:
            try:
                os.unlink(tmp.name)
            except OSError as cleanup_error:
                self._log(f"Could not delete temp file {tmp.name}: {cleanup_error}")
            raise ChangelogError(f"Could not write {self.changelog_path}: {e}")
