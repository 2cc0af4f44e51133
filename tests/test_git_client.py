"""
Tests for GitClient.

Query methods run against throwaway repositories created with the real git
binary; signing is only exercised through a mocked subprocess since test
machines have no release key.
"""
import shutil
import subprocess
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

from releasetag.domain import Intent
from releasetag.domain.descriptor import describe_excludes, describe_pattern
from releasetag.infra.git_client import GitClient, GitResult
from releasetag.services.checkout_service import CheckoutInspector
from releasetag.services.release_service import ReleasePlanner

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(cwd, *args):
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout.strip()


@pytest.fixture
def isolated_git(tmp_path, monkeypatch):
    """Keep the developer's git configuration out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gitconfig").write_text("")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for var in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{var}_NAME", "Release Bot")
        monkeypatch.setenv(f"{var}_EMAIL", "release@example.com")
    return tmp_path


@pytest.fixture
def repo(isolated_git):
    path = isolated_git / "repo"
    path.mkdir()
    git(path, "init", "--quiet")
    git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    (path / "app.txt").write_text("v1\n")
    git(path, "add", "app.txt")
    git(path, "commit", "--quiet", "-m", "initial")
    return path


def annotated_tag(path, name):
    git(path, "tag", "-a", "-m", f"tagname: {name}", name)


def empty_commit(path, message="change"):
    git(path, "commit", "--quiet", "--allow-empty", "-m", message)
    return git(path, "rev-parse", "HEAD")


@pytest.fixture
def client():
    return GitClient(timeout=30)


class TestGitResult:

    def test_ok(self):
        assert GitResult().ok
        assert not GitResult(returncode=1).ok

    def test_detail_keeps_last_lines(self):
        result = GitResult(stderr="one\n\ntwo\nthree\nfour\n", returncode=1)
        assert result.detail == "two; three; four"

    def test_detail_falls_back_to_stdout(self):
        assert GitResult(stdout="only stdout\n", returncode=1).detail == "only stdout"


@requires_git
class TestRepositoryQueries:

    def test_toplevel(self, client, repo):
        assert Path(client.toplevel(str(repo))).resolve() == repo.resolve()

    def test_toplevel_outside_repository(self, client, isolated_git):
        outside = isolated_git / "plain"
        outside.mkdir()
        assert client.toplevel(str(outside)) is None
        assert client.toplevel(str(isolated_git / "missing")) is None

    def test_git_dir(self, client, repo):
        assert Path(client.git_dir(str(repo))).resolve() == (repo / ".git").resolve()

    def test_head_commit(self, client, repo):
        assert client.head_commit(str(repo)) == git(repo, "rev-parse", "HEAD")

    def test_head_commit_without_commits(self, client, isolated_git):
        path = isolated_git / "empty"
        path.mkdir()
        git(path, "init", "--quiet")
        assert client.head_commit(str(path)) is None

    def test_current_branch(self, client, repo):
        assert client.current_branch(str(repo)) == "master"
        git(repo, "checkout", "--quiet", "--detach", "HEAD")
        assert client.current_branch(str(repo)) is None

    def test_uncommitted_changes(self, client, repo):
        assert client.has_uncommitted_changes(str(repo)) is False
        (repo / "notes.txt").write_text("untracked\n")
        assert client.has_uncommitted_changes(str(repo)) is False
        (repo / "app.txt").write_text("v2\n")
        assert client.has_uncommitted_changes(str(repo)) is True

    def test_remotes(self, client, repo, isolated_git):
        assert client.remotes(str(repo)) == []
        git(repo, "remote", "add", "origin", str(isolated_git / "elsewhere"))
        assert client.remotes(str(repo)) == ["origin"]


@requires_git
class TestTagQueries:

    def test_describe_long_form(self, client, repo):
        annotated_tag(repo, "master-0.0.0")
        head = empty_commit(repo)
        output = client.describe(str(repo), describe_pattern(), excludes=describe_excludes())
        assert output == f"master-0.0.0-1-g{head}"

    def test_describe_skips_suffixed_tags(self, client, repo):
        annotated_tag(repo, "master-0.0.0")
        head = empty_commit(repo)
        annotated_tag(repo, "master-0.0.1-rc1")
        output = client.describe(str(repo), describe_pattern("master"), excludes=describe_excludes("master"))
        assert output == f"master-0.0.0-1-g{head}"

    def test_describe_respects_prefix(self, client, repo):
        annotated_tag(repo, "master-1.0.0")
        git(repo, "checkout", "--quiet", "-b", "feature")
        empty_commit(repo)
        assert client.describe(str(repo), describe_pattern("feature")) is None
        assert client.describe(str(repo), describe_pattern()).startswith("master-1.0.0-1-g")

    def test_describe_skips_sibling_prefix(self, client, repo):
        """'rel-2-1.4.0' matches the 'rel' glob but belongs to prefix 'rel-2'."""
        annotated_tag(repo, "rel-0.9.0")
        empty_commit(repo)
        annotated_tag(repo, "rel-2-1.4.0")
        head = empty_commit(repo)
        output = client.describe(str(repo), describe_pattern("rel"), excludes=describe_excludes("rel"))
        assert output == f"rel-0.9.0-2-g{head}"

    def test_describe_without_tags(self, client, repo):
        assert client.describe(str(repo), describe_pattern()) is None

    def test_list_tags(self, client, repo):
        for name in ("master-0.1.0", "master-0.2.0", "prod-0.1.0"):
            annotated_tag(repo, name)
        assert sorted(client.list_tags(str(repo), "master-*")) == ["master-0.1.0", "master-0.2.0"]
        assert client.list_tags(str(repo), "staging-*") == []

    def test_verify_unsigned_tag_fails(self, client, repo):
        annotated_tag(repo, "master-0.0.0")
        result = client.verify_tag(str(repo), "master-0.0.0")
        assert not result.ok
        assert result.detail


@requires_git
class TestMutations:

    def test_checkout_detaches(self, client, repo):
        annotated_tag(repo, "master-0.0.0")
        first = git(repo, "rev-parse", "HEAD")
        empty_commit(repo)

        result = client.checkout(str(repo), "master-0.0.0")

        assert result.ok
        assert client.current_branch(str(repo)) is None
        assert client.head_commit(str(repo)) == first

    def test_checkout_unknown_ref(self, client, repo):
        result = client.checkout(str(repo), "master-9.9.9")
        assert not result.ok
        assert "master-9.9.9" in result.detail

    def test_fetch_tags(self, client, repo, isolated_git):
        clone = isolated_git / "clone"
        git(isolated_git, "clone", "--quiet", str(repo), str(clone))
        empty_commit(repo)
        annotated_tag(repo, "master-0.1.0")

        result = client.fetch_tags(str(clone), "origin")

        assert result.ok
        assert client.list_tags(str(clone), "master-*") == ["master-0.1.0"]

    def test_fetch_unknown_remote(self, client, repo):
        assert not client.fetch_tags(str(repo), "nowhere").ok


class TestSubprocessHandling:

    @patch("releasetag.infra.git_client.subprocess.run")
    def test_signed_tag_uses_default_key(self, mock_run, client):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        client.create_signed_tag("/repo", "master-0.0.1", "tagname: master-0.0.1\n")

        args, kwargs = mock_run.call_args
        assert args[0] == ["git", "tag", "-s", "-F", "-", "master-0.0.1"]
        assert kwargs['input'] == "tagname: master-0.0.1\n"
        assert kwargs['cwd'] == "/repo"

    @patch("releasetag.infra.git_client.subprocess.run")
    def test_signed_tag_with_key(self, mock_run, client):
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        client.create_signed_tag("/repo", "master-0.0.1", "msg\n", key="ABCD1234")
        assert mock_run.call_args[0][0] == ["git", "tag", "-u", "ABCD1234", "-F", "-", "master-0.0.1"]

    @patch("releasetag.infra.git_client.subprocess.run")
    def test_timeout(self, mock_run, client):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=30)
        result = client.fetch_tags("/repo")
        assert result.returncode == -1
        assert "timed out" in result.stderr

    @patch("releasetag.infra.git_client.subprocess.run")
    def test_git_missing(self, mock_run, client):
        mock_run.side_effect = FileNotFoundError("git")
        assert client.head_commit("/repo") is None


@requires_git
class TestSiblingPrefixes:
    """Branch 'rel' cut from 'rel-2', whose tags also match the 'rel' glob."""

    @pytest.fixture
    def rel_repo(self, repo):
        git(repo, "checkout", "--quiet", "-b", "rel-2")
        annotated_tag(repo, "rel-2-1.4.0")
        git(repo, "checkout", "--quiet", "-b", "rel")
        empty_commit(repo)
        return repo

    def test_inspect_sees_no_own_tag(self, client, rel_repo):
        state = CheckoutInspector(client).inspect(str(rel_repo))
        assert state.branch == "rel"
        assert state.own is None
        assert state.nearest.prefix == "rel-2"
        assert state.forked

    def test_defer_matches_sibling_tag(self, client, rel_repo):
        state = CheckoutInspector(client).inspect(str(rel_repo))
        planner = ReleasePlanner()
        intent = planner.resolve_intent(Intent.DEFER, state)
        plan = planner.plan(intent, state)
        assert intent is Intent.MATCH
        assert plan.tag_name == "rel-1.4.0"
        assert "prior: rel-2-1.4.0" in plan.message_lines
