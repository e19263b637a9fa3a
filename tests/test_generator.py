"""
Tests for ChangelogGenerator: commit range selection, preview, merge and write.

Run with:
    pytest tests/test_generator.py -v
"""

import os
import stat
import sys

import pytest

from changelog_gen.changelog import INITIAL_CHANGELOG, ChangelogError, ChangelogGenerator, read_watermark
from changelog_gen.git import CommitRecord, GitError

SCENARIO_COMMITS = [
    "fix(api): resolve timeout issue",
    "add button component",
    "feat(ui): add responsive nav",
]

SCENARIO_PREVIEW = (
    "### Added\n\n"
    "- button component\n"
    "**ui**: responsive nav\n\n"
    "### Fixed\n\n"
    "**api**: resolve timeout issue"
)


def entry_lines(document):
    return [line for line in document.splitlines() if line.startswith('- ') or line.startswith('**')]


def unreleased_body(document):
    body = document.split("## [Unreleased]\n\n", 1)[1]
    return body.split("\n\n<!-- Generated:", 1)[0]


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

class TestPreview:

    def test_renders_new_sections(self, make_source, changelog_path):
        generator = ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path)
        assert generator.generate(preview=True) == SCENARIO_PREVIEW

    def test_does_not_create_file(self, make_source, changelog_path):
        ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate(preview=True)
        assert not changelog_path.exists()

    def test_does_not_modify_file(self, make_source, changelog_path):
        changelog_path.write_text(INITIAL_CHANGELOG, encoding='utf-8')
        ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate(preview=True)
        assert changelog_path.read_text(encoding='utf-8') == INITIAL_CHANGELOG


# ---------------------------------------------------------------------------
# First run and incremental runs
# ---------------------------------------------------------------------------

class TestGenerate:

    def test_first_run_bootstraps_document(self, make_source, changelog_path):
        source = make_source(*SCENARIO_COMMITS)
        result = ChangelogGenerator(source, changelog_path).generate()

        assert result == changelog_path.read_text(encoding='utf-8')
        assert result.startswith(INITIAL_CHANGELOG + SCENARIO_PREVIEW + "\n\n<!-- Generated: ")
        assert result.endswith(f"<!-- CI-LAST-PROCESSED: {source.get_head_hash()} -->\n")

    def test_first_run_reads_fallback_limit(self, make_source, changelog_path):
        source = make_source(*(f"feat: add widget number {i}" for i in range(60)))
        generator = ChangelogGenerator(source, changelog_path, commit_limit=50)
        result = generator.generate()

        assert source.calls[0] == (None, 50)
        assert len(entry_lines(result)) == 50

    def test_next_run_starts_at_watermark(self, make_source, changelog_path):
        source = make_source(*SCENARIO_COMMITS)
        generator = ChangelogGenerator(source, changelog_path)
        generator.generate()
        first_head = source.get_head_hash()

        source.commit("perf(db): batch inserts for imports")
        result = generator.generate()

        assert source.calls[-1] == (first_head, None)
        assert "### Performance\n\n**db**: batch inserts for imports" in result
        assert len(entry_lines(result)) == 4

    def test_explicit_since_overrides_watermark(self, make_source, changelog_path):
        source = make_source("chore: initial setup of the repo", *SCENARIO_COMMITS)
        first = source.commits[0].hash
        result = ChangelogGenerator(source, changelog_path).generate(preview=True, since=first)

        assert source.calls == [(first, None)]
        assert result == SCENARIO_PREVIEW

    def test_release_blocks_preserved(self, make_source, changelog_path):
        releases = "## [1.0.0] - 2024-01-01\n\n### Added\n\n- first public release\n"
        changelog_path.write_text(INITIAL_CHANGELOG + releases, encoding='utf-8')

        result = ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()

        assert result.endswith(releases)
        assert result.index("CI-LAST-PROCESSED") < result.index("## [1.0.0]")

    def test_log_receives_progress(self, make_source, changelog_path):
        messages = []
        generator = ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path, log=messages.append)
        generator.generate()
        assert "Processing 3 commits..." in messages
        assert any("No previous run found" in m for m in messages)


# ---------------------------------------------------------------------------
# Nothing to do
# ---------------------------------------------------------------------------

class TestNothingNew:

    def test_second_run_is_noop(self, make_source, changelog_path):
        generator = ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path)
        generator.generate()
        before = changelog_path.read_bytes()

        assert generator.generate() is None
        assert changelog_path.read_bytes() == before

    def test_watermark_at_head_is_noop(self, make_source, changelog_path):
        source = make_source()
        source.commits.append(CommitRecord(hash="abc123", message="feat: add the first feature"))
        document = (
            INITIAL_CHANGELOG
            + "### Added\n\n- the first feature\n\n"
            + "<!-- Generated: 2024-01-01T00:00:00.000Z Commit: abc123 -->\n"
            + "<!-- CI-LAST-PROCESSED: abc123 -->\n"
        )
        changelog_path.write_text(document, encoding='utf-8')

        assert ChangelogGenerator(source, changelog_path).generate() is None
        assert source.calls == [("abc123", None)]
        assert changelog_path.read_text(encoding='utf-8') == document

    def test_only_noise_returns_none(self, make_source, changelog_path):
        source = make_source("wip", "update", "Found 2 staged files", "feat: add x")
        assert ChangelogGenerator(source, changelog_path).generate() is None
        assert not changelog_path.exists()

    def test_empty_history_returns_none(self, make_source, changelog_path):
        assert ChangelogGenerator(make_source(), changelog_path).generate() is None


# ---------------------------------------------------------------------------
# Watermark and dedup properties across runs
# ---------------------------------------------------------------------------

class TestRepeatedRuns:

    def test_single_watermark_after_many_runs(self, make_source, changelog_path):
        source = make_source(*SCENARIO_COMMITS)
        generator = ChangelogGenerator(source, changelog_path)

        for i in range(4):
            source.commit(f"feat(run{i}): add feature for round {i}")
            document = generator.generate()
            assert document.count("<!-- CI-LAST-PROCESSED:") == 1
            assert document.count("<!-- Generated:") == 1
            assert read_watermark(document).last_processed == source.get_head_hash()

    def test_rerun_over_same_range_does_not_duplicate(self, make_source, changelog_path):
        source = make_source("wip", *SCENARIO_COMMITS)
        start = source.commits[0].hash
        generator = ChangelogGenerator(source, changelog_path)

        first = entry_lines(generator.generate())
        second = entry_lines(generator.generate(since=start))
        assert sorted(second) == sorted(first)

        source.commit("feat(search): add fuzzy matching to search")
        third = entry_lines(generator.generate(since=start))
        assert len(third) == len(first) + 1
        assert set(first) < set(third)

    def test_rerun_keeps_hand_edits(self, make_source, changelog_path):
        source = make_source(*SCENARIO_COMMITS)
        generator = ChangelogGenerator(source, changelog_path)
        generator.generate()

        edited = changelog_path.read_text(encoding='utf-8').replace(
            "### Fixed\n\n", "### Fixed\n\n- restored the legacy export path\n", 1
        )
        changelog_path.write_text(edited, encoding='utf-8')

        source.commit("docs(api): document pagination parameters")
        result = generator.generate()
        assert "- restored the legacy export path" in result
        assert "### Documentation\n\n**api**: document pagination parameters" in result


# ---------------------------------------------------------------------------
# Malformed documents
# ---------------------------------------------------------------------------

class TestMalformedDocument:

    def test_unparsable_unreleased_body_replaced(self, make_source, changelog_path):
        changelog_path.write_text(
            "# Changelog\n\n## [Unreleased]\n\n??? garbled\nnot a section at all\n",
            encoding='utf-8',
        )
        source = make_source(
            "feat(api): add pagination to list endpoints",
            "fix: handle empty search query",
        )

        result = ChangelogGenerator(source, changelog_path).generate()

        assert "garbled" not in result
        assert unreleased_body(result) == (
            "### Added\n\n**api**: pagination to list endpoints\n\n"
            "### Fixed\n\n- handle empty search query"
        )


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class FailingSource:
    """Commit source whose queries fail."""

    def __init__(self, fail_commits=True, wrapped=None):
        self.fail_commits = fail_commits
        self.wrapped = wrapped

    def get_commits(self, since=None, limit=None):
        if self.fail_commits:
            raise GitError("Git command failed: git log")
        return self.wrapped.get_commits(since, limit)

    def get_head_hash(self):
        raise GitError("Git command failed: git rev-parse HEAD")


class TestFailures:

    def test_commit_query_failure_is_fatal(self, changelog_path):
        changelog_path.write_text(INITIAL_CHANGELOG, encoding='utf-8')
        generator = ChangelogGenerator(FailingSource(), changelog_path)

        with pytest.raises(ChangelogError, match="Failed to get commits"):
            generator.generate()
        assert changelog_path.read_text(encoding='utf-8') == INITIAL_CHANGELOG

    def test_unknown_watermark_is_fatal(self, make_source, changelog_path):
        changelog_path.write_text(INITIAL_CHANGELOG + "<!-- CI-LAST-PROCESSED: deadbeef -->\n", encoding='utf-8')
        with pytest.raises(ChangelogError, match="bad revision"):
            ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()

    def test_head_failure_writes_nothing(self, make_source, changelog_path):
        source = FailingSource(fail_commits=False, wrapped=make_source(*SCENARIO_COMMITS))
        with pytest.raises(ChangelogError, match="Failed to read HEAD"):
            ChangelogGenerator(source, changelog_path).generate()
        assert not changelog_path.exists()

    def test_head_failure_does_not_affect_preview(self, make_source, changelog_path):
        source = FailingSource(fail_commits=False, wrapped=make_source(*SCENARIO_COMMITS))
        assert ChangelogGenerator(source, changelog_path).generate(preview=True) == SCENARIO_PREVIEW

    def test_write_failure_keeps_previous_document(self, make_source, changelog_path, monkeypatch):
        changelog_path.write_text(INITIAL_CHANGELOG, encoding='utf-8')

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail_replace)

        with pytest.raises(ChangelogError, match="disk full"):
            ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()

        assert changelog_path.read_text(encoding='utf-8') == INITIAL_CHANGELOG
        assert list(changelog_path.parent.iterdir()) == [changelog_path]

    def test_missing_directory_is_fatal(self, make_source, tmp_path):
        path = tmp_path / "missing" / "CHANGELOG.md"
        with pytest.raises(ChangelogError, match="Could not write"):
            ChangelogGenerator(make_source(*SCENARIO_COMMITS), path).generate()

    def test_undecodable_document_is_fatal(self, make_source, changelog_path):
        original = b"# Changelog\n\xff\xfe\n## [Unreleased]\n"
        changelog_path.write_bytes(original)

        with pytest.raises(ChangelogError, match="Could not read"):
            ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()
        assert changelog_path.read_bytes() == original


# ---------------------------------------------------------------------------
# File properties kept across writes
# ---------------------------------------------------------------------------

needs_posix_modes = pytest.mark.skipif(sys.platform == 'win32', reason="POSIX file modes")


class TestFileProperties:

    @needs_posix_modes
    def test_existing_mode_kept(self, make_source, changelog_path):
        changelog_path.write_text(INITIAL_CHANGELOG, encoding='utf-8')
        os.chmod(changelog_path, 0o644)

        ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()

        assert stat.S_IMODE(os.stat(changelog_path).st_mode) == 0o644

    @needs_posix_modes
    def test_new_file_follows_umask(self, make_source, changelog_path):
        previous = os.umask(0o022)
        try:
            ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path).generate()
        finally:
            os.umask(previous)

        assert stat.S_IMODE(os.stat(changelog_path).st_mode) == 0o644

    def test_crlf_line_endings_kept(self, make_source, changelog_path):
        changelog_path.write_bytes(INITIAL_CHANGELOG.replace("\n", "\r\n").encode('utf-8'))
        source = make_source(*SCENARIO_COMMITS)

        result = ChangelogGenerator(source, changelog_path).generate()

        raw = changelog_path.read_bytes()
        assert raw.count(b"\n") == raw.count(b"\r\n")
        assert raw.decode('utf-8').replace("\r\n", "\n") == result
        assert read_watermark(result).last_processed == source.get_head_hash()

    def test_crlf_document_second_run_is_noop(self, make_source, changelog_path):
        changelog_path.write_bytes(INITIAL_CHANGELOG.replace("\n", "\r\n").encode('utf-8'))
        generator = ChangelogGenerator(make_source(*SCENARIO_COMMITS), changelog_path)
        generator.generate()
        before = changelog_path.read_bytes()

        assert generator.generate() is None
        assert changelog_path.read_bytes() == before
