"""Pytest configuration and shared fixtures for gitinfo tests."""

import io
import os
import shutil
import subprocess
from datetime import datetime, timedelta, timezone

import pytest

from gitinfo.core.errors import GitQueryError

# Commit time used by the git_repo fixture: 2019-12-24T02:44:51+03:00
COMMIT_EPOCH = 1577145891
ORIGIN_URL = "https://github.com/pgmig-sql/pgmig.git"
FIXED_NOW = datetime(2024, 5, 1, 12, 30, 5, tzinfo=timezone(timedelta(hours=3)))


class FakeBackend:
    """
    Backend returning canned git output keyed by subcommand.

    A missing key makes the query fail like a non-zero git exit.
    """

    def __init__(self, responses=None, files=None):
        self.responses = responses or {}
        self.files = files or {}
        self.calls = []

    def run(self, args):
        self.calls.append(args)
        subcommand = args[3]
        response = self.responses.get(subcommand)
        if response is None:
            raise GitQueryError(f"git {subcommand} failed")
        return response

    def open(self, name):
        try:
            return io.BytesIO(self.files[name])
        except KeyError:
            raise FileNotFoundError(name) from None


@pytest.fixture
def fake_backend():
    """Backend for a repository with origin, a tag and one commit."""
    return FakeBackend(
        responses={
            "config": ORIGIN_URL + "\n",
            "describe": "v0.33-1-g4f4575a\n",
            "show": str(COMMIT_EPOCH),
        }
    )


def run_git(path, *args, env=None):
    """Run a git command in ``path`` with signing and user config pinned."""
    return subprocess.run(
        [
            "git",
            "-c", "user.name=Test User",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "tag.gpgsign=false",
            *args,
        ],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )


@pytest.fixture
def empty_git_repo(tmp_path):
    """Freshly initialized git repository: no commits, tags or origin."""
    if shutil.which("git") is None:
        pytest.skip("git not found")
    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init")
    return repo


@pytest.fixture
def git_repo(empty_git_repo):
    """Git repository with an origin and one commit at COMMIT_EPOCH."""
    repo = empty_git_repo
    run_git(repo, "remote", "add", "origin", ORIGIN_URL)
    (repo / "test.txt").write_text("test")
    run_git(repo, "add", ".")
    env = {
        **os.environ,
        "GIT_AUTHOR_DATE": f"{COMMIT_EPOCH} +0300",
        "GIT_COMMITTER_DATE": f"{COMMIT_EPOCH} +0300",
    }
    run_git(repo, "commit", "-m", "Initial commit", env=env)
    return repo
