"""Changelog Engine Package"""

from changelog_gen.changelog.models import (
    CommitType, ChangelogEntry, ChangelogSection, RenderedLine,
    SECTION_TITLES, SECTION_ORDER, COMMIT_TYPE_NAMES,
)
from changelog_gen.changelog.parser import parse_commit_message, parse_commits, infer_commit_type
from changelog_gen.changelog.filters import (
    is_changelog_worthy, filter_entries, dedupe_entries, dedupe_lines,
    normalize_description, normalize_line,
)
from changelog_gen.changelog.renderer import (
    group_entries, clean_description, render_entry, render_sections,
    render_lines, parse_rendered_lines, MIN_ENTRY_LENGTH,
)
from changelog_gen.changelog.merge import INITIAL_CHANGELOG, find_unreleased, merge_sections, merge_unreleased
from changelog_gen.changelog.watermark import Watermark, read_watermark, strip_watermarks, stamp_watermark
from changelog_gen.changelog.generator import ChangelogGenerator, ChangelogError, render_commits, update_document

__all__ = [
    "CommitType",
    "ChangelogEntry",
    "ChangelogSection",
    "RenderedLine",
    "SECTION_TITLES",
    "SECTION_ORDER",
    "COMMIT_TYPE_NAMES",
    "parse_commit_message",
    "parse_commits",
    "infer_commit_type",
    "is_changelog_worthy",
    "filter_entries",
    "dedupe_entries",
    "dedupe_lines",
    "normalize_description",
    "normalize_line",
    "group_entries",
    "clean_description",
    "render_entry",
    "render_sections",
    "render_lines",
    "parse_rendered_lines",
    "MIN_ENTRY_LENGTH",
    "INITIAL_CHANGELOG",
    "find_unreleased",
    "merge_sections",
    "merge_unreleased",
    "Watermark",
    "read_watermark",
    "strip_watermarks",
    "stamp_watermark",
    "ChangelogGenerator",
    "ChangelogError",
    "render_commits",
    "update_document",
]
