"""Tests for GitHelper against real repositories."""

import shutil
import subprocess

import pytest

from heroku_san.exceptions import GitCommandError
from heroku_san.git import DEPLOY_REF, GitHelper

pytestmark = [
    pytest.mark.git,
    pytest.mark.skipif(shutil.which("git") is None, reason="git is required"),
]


def _git(cwd, *args):
    return subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    ).stdout.strip()


@pytest.fixture
def workdir(tmp_path):
    repo = tmp_path / "app"
    repo.mkdir()
    _git(repo, "init", "-q")
    (repo / "README").write_text("one\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-q", "-m", "first")
    _git(repo, "tag", "production/2024-01-01")
    (repo / "README").write_text("two\n")
    _git(repo, "commit", "-q", "-am", "second")
    _git(repo, "tag", "production/2024-02-01")
    (repo / "README").write_text("three\n")
    _git(repo, "commit", "-q", "-am", "third")
    return repo


@pytest.fixture
def remote(tmp_path):
    bare = tmp_path / "heroku.git"
    subprocess.run(["git", "init", "-q", "--bare", str(bare)], check=True)
    return bare


@pytest.fixture
def helper(workdir):
    return GitHelper(cwd=workdir)


def test_tag_picks_the_last_match(helper):
    assert helper.tag("production/*") == "production/2024-02-01"


def test_tag_without_pattern_or_match(helper):
    assert helper.tag(None) is None
    assert helper.tag("staging/*") is None


def test_parsed_tag_resolves_to_a_sha(helper, workdir):
    assert helper.parsed_tag("production/*") == _git(workdir, "rev-parse", "production/2024-02-01")


def test_parsed_tag_without_match(helper):
    assert helper.parsed_tag("staging/*") is None


def test_remote_revision_of_an_empty_remote(helper, remote):
    assert helper.remote_revision(str(remote)) is None


def test_named_rev_of_nothing(helper):
    assert helper.named_rev(None) == ""


def test_push_and_read_back(helper, workdir, remote):
    sha = helper.parsed_tag("production/*")
    helper.push(sha, str(remote))

    assert helper.remote_revision(str(remote)) == sha
    named = helper.named_rev(sha)
    assert named.startswith(f"{sha} ")
    assert len(named) > len(sha) + 1
    refs = _git(workdir, "for-each-ref", "--format=%(refname)")
    assert DEPLOY_REF not in refs


def test_push_defaults_to_head(helper, workdir, remote):
    helper.push(None, str(remote))
    assert helper.remote_revision(str(remote)) == _git(workdir, "rev-parse", "HEAD")


def test_rewinding_needs_force(helper, workdir, remote):
    helper.push(None, str(remote))
    older = helper.parsed_tag("production/*")

    with pytest.raises(GitCommandError):
        helper.push(older, str(remote))
    helper.push(older, str(remote), ["--force"])

    assert helper.remote_revision(str(remote)) == older
    assert DEPLOY_REF not in _git(workdir, "for-each-ref", "--format=%(refname)")


def test_failing_command_raises(helper):
    with pytest.raises(GitCommandError) as excinfo:
        helper.rev_parse("no-such-ref")
    assert excinfo.value.exit_code != 0
    assert excinfo.value.command[:2] == ["git", "rev-parse"]
