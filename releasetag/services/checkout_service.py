"""
Checkout inspection service for releasetag.

Answers the read-only questions every command starts with: is this the top
of a repository, can we write to it, which branch is checked out, is the tree
dirty, and has the branch forked off another branch's releases.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from ..domain import CheckoutState, VersionDescriptor, describe_pattern
from ..domain.descriptor import describe_excludes
from ..exit_codes import GitCommandError, NotARepository, WriteAccessDenied
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)


class CheckoutInspector:
    """
    Derives CheckoutState from repository queries.

    Example:
        inspector = CheckoutInspector()
        root = inspector.ensure_repository(os.getcwd())
        state = inspector.inspect(root)
        if state.forked:
            print(f"{state.branch} was forked from {state.nearest.prefix}")
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def ensure_repository(self, path: str) -> str:
        """
        Require path to be the top-level directory of a repository.

        Returns:
            The repository's top-level directory

        Raises:
            NotARepository: outside a repository, or in a subdirectory of one
        """
        toplevel = self.git.toplevel(path)
        if not toplevel:
            raise NotARepository(f"Not a git repository: {path}")
        if Path(toplevel).resolve() != Path(path).resolve():
            raise NotARepository(
                f"Must be run from the repository's top-level directory ({toplevel}), not {path}"
            )
        return toplevel

    def ensure_writable(self, path: str) -> None:
        """
        Require write access to the working tree and the git directory.

        Raises:
            WriteAccessDenied: naming the first directory that is read-only
        """
        candidates = [path]
        git_dir = self.git.git_dir(path)
        if git_dir:
            candidates.append(git_dir)
        for candidate in candidates:
            if not os.access(candidate, os.W_OK):
                raise WriteAccessDenied(candidate)

    def describe(self, path: str, prefix: str = '*') -> Optional[VersionDescriptor]:
        """Nearest release tag under prefix, or None if there is none."""
        output = self.git.describe(path, describe_pattern(prefix), excludes=describe_excludes(prefix))
        if output is None:
            return None
        descriptor = VersionDescriptor.parse(output)
        if prefix != '*' and descriptor.prefix != prefix:
            logger.debug("Ignoring %s: prefix is not '%s'", descriptor.tag_name, prefix)
            return None
        return descriptor

    def inspect(self, path: str) -> CheckoutState:
        """
        Take a snapshot of the checkout.

        Raises:
            GitCommandError: when the repository has no commits yet
            MalformedDescriptor: when describe output cannot be parsed
        """
        commit = self.git.head_commit(path)
        if not commit:
            raise GitCommandError(f"Repository at {path} has no commits")

        branch = self.git.current_branch(path)
        dirty = self.git.has_uncommitted_changes(path)
        nearest = self.describe(path)
        own = self.describe(path, branch) if branch else None

        forked = bool(
            branch
            and nearest is not None
            and nearest.prefix != branch
            and (own is None or own.distance > nearest.distance)
        )

        state = CheckoutState(
            branch=branch,
            dirty=dirty,
            forked=forked,
            commit=commit,
            nearest=nearest,
            own=own,
        )
        logger.debug(
            "Checkout: branch=%s dirty=%s forked=%s nearest=%s own=%s",
            branch, dirty, forked,
            nearest.tag_name if nearest else None,
            own.tag_name if own else None,
        )
        return state
