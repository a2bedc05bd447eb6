"""
Shared pytest fixtures for changelog-spine tests.

This module provides:
- The JSON fixture repository (no git needed)
- A fake git backend for hand-built tag/commit scenarios
- A throwaway live git repository for executor tests (skipped without git)
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

import pytest

from changelog_spine.changelog.git_command import FixtureGitExecutor
from changelog_spine.changelog.model import BuildTag, CommitEntry
from changelog_spine.core.errors import TagNotFoundError
from changelog_spine.core.settings import ChangelogSettings

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "changelog_repo"
FIXTURE_REPO = FIXTURE_DIR / "repo.json"


class FakeGit:
    """Backend returning prepared tags and commits, recording the queries it gets."""

    def __init__(
        self,
        tags: Iterable[BuildTag] = (),
        commits: Iterable[CommitEntry] = (),
        *,
        commits_by_range: dict[tuple[str | None, str], list[CommitEntry]] | None = None,
    ):
        self.tags = list(tags)
        self.commits = list(commits)
        self.commits_by_range = commits_by_range or {}
        self.log_calls: list[tuple[str | None, str]] = []

    def resolve_commit(self, tag_name: str) -> str:
        for tag in self.tags:
            if tag.name == tag_name:
                return tag.commit_sha or f"sha-{tag_name}"
        raise TagNotFoundError(tag_name)

    def log_between(self, from_commit: str | None, to_commit: str) -> list[CommitEntry]:
        self.log_calls.append((from_commit, to_commit))
        if (from_commit, to_commit) in self.commits_by_range:
            return list(self.commits_by_range[(from_commit, to_commit)])
        return list(self.commits)

    def list_tags(self, variant_filter: Iterable[str]) -> list[BuildTag]:
        variants = set(variant_filter)
        return sorted(
            (t for t in self.tags if t.variant in variants),
            key=lambda t: (t.build_number, t.name),
            reverse=True,
        )


@pytest.fixture
def fake_git() -> type[FakeGit]:
    """The FakeGit class, for tests that build their own scenarios."""
    return FakeGit


@pytest.fixture
def fixture_repo_path() -> Path:
    return FIXTURE_REPO


@pytest.fixture
def fixture_git() -> FixtureGitExecutor:
    return FixtureGitExecutor.from_file(FIXTURE_REPO)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> ChangelogSettings:
    """Settings isolated from the developer's environment and .env file."""
    for key in list(os.environ):
        if key.startswith("CHANGELOG_SPINE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return ChangelogSettings(build_dir=tmp_path / "build")


def _git(repo: Path, *args: str, env: dict[str, str] | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
        env=env,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A small live repository with release and debug build tags.

    History (oldest first)::

        PROJ-1: initial commit          <- v1.0.1-release, v1.0.1-debug
        PROJ-2: add settings screen
        chore: bump version             <- v1.0.2-debug (annotated)
        PROJ-2: polish settings screen
        fix typo                        <- v1.0.2-release
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    repo = tmp_path / "repo"
    repo.mkdir()
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Build Bot",
        "GIT_AUTHOR_EMAIL": "bot@example.com",
        "GIT_COMMITTER_NAME": "Build Bot",
        "GIT_COMMITTER_EMAIL": "bot@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
        "HOME": str(tmp_path),
    }
    _git(repo, "init", "-q", env=env)

    def commit(message: str) -> None:
        _git(repo, "commit", "-q", "--allow-empty", "-m", message, env=env)

    commit("PROJ-1: initial commit")
    _git(repo, "tag", "v1.0.1-release", env=env)
    _git(repo, "tag", "v1.0.1-debug", env=env)
    commit("PROJ-2: add settings screen")
    commit("chore: bump version")
    _git(repo, "tag", "-a", "v1.0.2-debug", "-m", "debug build 2", env=env)
    commit("PROJ-2: polish settings screen")
    commit("fix typo")
    _git(repo, "tag", "v1.0.2-release", env=env)
    return repo
