"""Git Analyzer - Read commit history from git."""

import subprocess

from changelog_gen.git.base import CommitRecord, CommitSource, GitError

# Hash and subject separated by a tab; subjects never contain one
LOG_FORMAT = '--format=%H%x09%s'


class GitAnalyzer(CommitSource):
    """Reads commit ranges from the git repository in the working directory."""

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.cwd,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def _has_revision(self, rev: str) -> bool:
        try:
            self._run_git('rev-parse', '--verify', '--quiet', f'{rev}^{{commit}}')
            return True
        except GitError:
            return False

    def get_commits(self, since: str | None = None, limit: int | None = None) -> list[CommitRecord]:
        if since:
            rev_range = [f'{since}..HEAD']
        elif limit and self._has_revision(f'HEAD~{limit}'):
            rev_range = [f'HEAD~{limit}..HEAD']
        else:
            # Fewer than `limit` commits: take the whole history
            rev_range = ['HEAD']

        output = self._run_git('log', *rev_range, LOG_FORMAT, '--no-merges', '--reverse')
        return parse_log_output(output)

    def get_head_hash(self) -> str:
        return self._run_git('rev-parse', 'HEAD').strip()


def parse_log_output(output: str) -> list[CommitRecord]:
    """Parse `git log --format=%H%x09%s` output into commit records."""
    commits = []
    for line in output.strip().split('\n'):
        commit_hash, _, message = line.partition('\t')
        commit_hash = commit_hash.strip()
        message = message.strip()
        if commit_hash and message:
            commits.append(CommitRecord(hash=commit_hash, message=message))
    return commits
