"""
Changelog Generator

Keeps CHANGELOG.md up to date from conventional commits in git history.
"""

__version__ = "1.0.0"

# Location of the changelog, relative to the repository root
DEFAULT_CHANGELOG = "CHANGELOG.md"

# Commits read on the first run, when the changelog carries no watermark yet
DEFAULT_COMMIT_LIMIT = 50
