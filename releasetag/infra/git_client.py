"""
Git client infrastructure for releasetag.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Queries return plain values (None when git fails); mutations return a
GitResult so the service layer can turn git's stderr into a precise error.
"""

import subprocess
from dataclasses import dataclass
from typing import Optional, List, Sequence
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


@dataclass
class GitResult:
    """Result of a git command."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def detail(self) -> str:
        """Most useful line(s) of git's complaint for error messages."""
        text = (self.stderr or self.stdout or "").strip()
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        return "; ".join(lines[-3:])


class GitClient:
    """
    Abstraction over git commands.

    Every method takes the repository path first, like `git -C <path>`.

    Example:
        client = GitClient()
        if client.current_branch("/path/to/repo") is None:
            print("HEAD is detached")
    """

    def __init__(self, timeout: int = 60):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 60)
        """
        self.timeout = timeout

    def _run(
        self,
        args: List[str],
        cwd: str,
        input: Optional[str] = None,
    ) -> GitResult:
        """
        Run a git command.

        Args:
            args: Arguments after `git` (e.g., ['tag', '--list'])
            cwd: Working directory
            input: Text fed to the command's stdin

        Returns:
            GitResult; returncode is -1 if git could not run or timed out
        """
        cmd = ['git'] + args
        logger.debug("Running: %s (in %s)", ' '.join(cmd), cwd)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                input=input,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return GitResult(stderr=f"timed out after {self.timeout}s", returncode=-1)
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return GitResult(stderr=str(e), returncode=-1)

        if result.returncode != 0:
            logger.debug("git exited %d: %s", result.returncode, result.stderr.strip())
        return GitResult(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode
        )

    def _query(self, args: List[str], cwd: str) -> Optional[str]:
        """Run a read-only command; stripped stdout or None on failure."""
        result = self._run(args, cwd=cwd)
        if result.ok:
            return result.stdout.strip()
        return None

    # Repository queries

    def toplevel(self, path: str) -> Optional[str]:
        """Top-level working directory of the repository containing path."""
        if not Path(path).is_dir():
            return None
        return self._query(['rev-parse', '--show-toplevel'], cwd=path) or None

    def git_dir(self, path: str) -> Optional[str]:
        """Absolute path of the repository's git directory."""
        output = self._query(['rev-parse', '--absolute-git-dir'], cwd=path)
        return output or None

    def head_commit(self, path: str) -> Optional[str]:
        """Full hash of HEAD, None for a repository without commits."""
        output = self._query(['rev-parse', '--verify', '--quiet', 'HEAD'], cwd=path)
        return output or None

    def current_branch(self, path: str) -> Optional[str]:
        """Get current branch name, None when HEAD is detached."""
        output = self._query(['symbolic-ref', '--quiet', '--short', 'HEAD'], cwd=path)
        return output or None

    def has_uncommitted_changes(self, path: str) -> bool:
        """Check for staged or unstaged changes to tracked files."""
        output = self._query(['status', '--porcelain', '--untracked-files=no'], cwd=path)
        return bool(output)

    def remotes(self, path: str) -> List[str]:
        """Names of configured remotes."""
        output = self._query(['remote'], cwd=path)
        if not output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    # Tags

    def describe(self, path: str, pattern: str, excludes: Sequence[str] = ()) -> Optional[str]:
        """
        Describe HEAD relative to the nearest annotated tag matching pattern.

        Always uses the long form with a full-length hash:
        ``<tag>-<distance>-g<40-hex>``.

        Args:
            path: Path to git repository
            pattern: Glob tags must match
            excludes: Globs of tags to skip even if they match pattern

        Returns:
            Describe string, or None if no matching tag is reachable
        """
        args = ['describe', '--long', '--abbrev=40', '--match', pattern]
        for exclude in excludes:
            args += ['--exclude', exclude]
        output = self._query(args + ['HEAD'], cwd=path)
        return output or None

    def list_tags(self, path: str, pattern: str) -> List[str]:
        """List tag names matching a glob pattern."""
        output = self._query(['tag', '--list', pattern], cwd=path)
        if not output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    def create_signed_tag(
        self,
        path: str,
        name: str,
        message: str,
        key: Optional[str] = None
    ) -> GitResult:
        """
        Create a GPG-signed annotated tag on HEAD.

        Args:
            path: Path to git repository
            name: Tag name
            message: Tag message, passed on stdin
            key: Signing key id (default: git's configured signing key)
        """
        args = ['tag']
        if key:
            args += ['-u', key]
        else:
            args.append('-s')
        args += ['-F', '-', name]
        return self._run(args, cwd=path, input=message)

    def verify_tag(self, path: str, name: str) -> GitResult:
        """Verify a tag's GPG signature."""
        return self._run(['verify-tag', name], cwd=path)

    def checkout(self, path: str, ref: str) -> GitResult:
        """Check out a ref as a detached HEAD."""
        return self._run(['checkout', '--quiet', '--detach', ref], cwd=path)

    def fetch_tags(self, path: str, remote: str = "origin") -> GitResult:
        """Fetch from remote, including all tags."""
        return self._run(['fetch', '--quiet', '--tags', remote], cwd=path)
