"""
Shared fixtures for releasetag tests.

FakeGitClient implements the GitClient interface over an in-memory history
so dispatcher and service tests can run real scenarios without git or gpg.
"""

import hashlib
from fnmatch import fnmatch
from typing import Dict, List, Optional

import pytest

from releasetag.config import get_default_config
from releasetag.infra.git_client import GitResult
from releasetag.services.dispatch_service import Dispatcher, DispatchOptions


def make_hash(n: int) -> str:
    return hashlib.sha1(str(n).encode()).hexdigest()


class FakeTag:
    def __init__(self, name, commit, message='', signed=True, key=None):
        self.name = name
        self.commit = commit
        self.message = message
        self.signed = signed
        self.key = key


class FakeGitClient:
    """In-memory stand-in for GitClient with a single-parent commit graph."""

    def __init__(self, root: str, branch: str = 'master'):
        self.root = root
        self.parents: Dict[str, Optional[str]] = {}
        self.branches: Dict[str, str] = {}
        self.tags: Dict[str, FakeTag] = {}
        self.head_branch: Optional[str] = branch
        self.head_detached: Optional[str] = None
        self.dirty = False
        self.remote_names: List[str] = []
        self.remote_tags: Dict[str, FakeTag] = {}
        self.fail_signing = False
        self.fail_fetch = False
        self.checkouts: List[str] = []
        self.fetches: List[str] = []
        self._counter = 0
        self.commit()

    # Helpers for building scenarios

    @property
    def head(self) -> str:
        if self.head_branch is not None:
            return self.branches[self.head_branch]
        return self.head_detached

    def commit(self) -> str:
        self._counter += 1
        new = make_hash(self._counter)
        self.parents[new] = self.head if (self.head_branch in self.branches or self.head_detached) else None
        if self.head_branch is not None:
            self.branches[self.head_branch] = new
        else:
            self.head_detached = new
        return new

    def tag(self, name: str, signed: bool = True, commit: Optional[str] = None) -> FakeTag:
        tag = FakeTag(name, commit or self.head, message=f"tagname: {name}\n", signed=signed)
        self.tags[name] = tag
        return tag

    def publish(self, name: str, commit: str, signed: bool = True) -> None:
        """Make a tag available on the remote only; fetch_tags() brings it in."""
        self.remote_tags[name] = FakeTag(name, commit, message=f"tagname: {name}\n", signed=signed)

    def switch(self, branch: str, create: bool = False) -> None:
        if create:
            self.branches[branch] = self.head
        self.head_branch = branch
        self.head_detached = None

    def detach(self, ref: str) -> None:
        commit = self.tags[ref].commit if ref in self.tags else ref
        self.head_branch = None
        self.head_detached = commit

    # GitClient interface

    def toplevel(self, path):
        return self.root

    def git_dir(self, path):
        return self.root

    def head_commit(self, path):
        return self.head

    def current_branch(self, path):
        return self.head_branch

    def has_uncommitted_changes(self, path):
        return self.dirty

    def remotes(self, path):
        return list(self.remote_names)

    def describe(self, path, pattern, excludes=()):
        commit, distance = self.head, 0
        while commit is not None:
            matches = [
                t for t in self.tags.values()
                if t.commit == commit and fnmatch(t.name, pattern)
                and not any(fnmatch(t.name, exclude) for exclude in excludes)
            ]
            if matches:
                return f"{matches[-1].name}-{distance}-g{self.head}"
            commit = self.parents.get(commit)
            distance += 1
        return None

    def list_tags(self, path, pattern):
        return sorted(name for name in self.tags if fnmatch(name, pattern))

    def create_signed_tag(self, path, name, message, key=None):
        if self.fail_signing:
            return GitResult(stderr="error: gpg failed to sign the data\n", returncode=128)
        if name in self.tags:
            return GitResult(stderr=f"fatal: tag '{name}' already exists\n", returncode=128)
        self.tags[name] = FakeTag(name, self.head, message=message, signed=True, key=key)
        return GitResult()

    def verify_tag(self, path, name):
        tag = self.tags.get(name)
        if tag is None:
            return GitResult(stderr=f"error: tag '{name}' not found.\n", returncode=1)
        if not tag.signed:
            return GitResult(stderr="error: no signature found\n", returncode=1)
        return GitResult(stderr='gpg: Good signature from "Release <release@example.com>"\n')

    def checkout(self, path, ref):
        if ref not in self.tags:
            return GitResult(stderr=f"error: pathspec '{ref}' did not match\n", returncode=1)
        self.checkouts.append(ref)
        self.detach(ref)
        return GitResult()

    def fetch_tags(self, path, remote='origin'):
        self.fetches.append(remote)
        if self.fail_fetch:
            return GitResult(stderr="fatal: unable to access remote\n", returncode=128)
        self.tags.update(self.remote_tags)
        return GitResult()


@pytest.fixture
def repo_root(tmp_path):
    return str(tmp_path)


@pytest.fixture
def fake_git(repo_root):
    return FakeGitClient(repo_root)


@pytest.fixture
def dispatcher(fake_git):
    return Dispatcher(
        config=get_default_config(),
        git_client=fake_git,
        options=DispatchOptions()
    )
