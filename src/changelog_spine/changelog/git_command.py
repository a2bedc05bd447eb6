"""Read-only access to git history for changelog generation.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: stdlib-only
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: changelog, git, tags, scanner

Answers the three questions the changelog engine asks of version control:
which build tags exist for a variant, which commit a tag points at, and
which commits lie between two commits. Nothing here mutates the
repository.

Architecture::

    ┌─────────────────────────────────────────────────┐
    │                 GitBackend (Protocol)            │
    ├─────────────────────────┬───────────────────────┤
    │  GitCommandExecutor     │  FixtureGitExecutor   │
    │  (subprocess calls)     │  (reads a JSON file)  │
    └─────────────────────────┴───────────────────────┘
                │                       │
                ▼                       ▼
       BuildTag[] / CommitEntry[]  BuildTag[] / CommitEntry[]

Usage::

    from changelog_spine.changelog.git_command import GitCommandExecutor

    git = GitCommandExecutor(Path("."))
    sha = git.resolve_commit("v1.2.5-release")
    commits = git.log_between(None, sha)
"""

from __future__ import annotations

import json
import re
import subprocess
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from changelog_spine.core.errors import RepositoryAccessError, TagNotFoundError
from changelog_spine.core.logging import get_logger
from changelog_spine.core.settings import DEFAULT_TAG_PATTERN

from .model import BuildTag, CommitEntry

logger = get_logger(__name__)

# SHA, parents, author date, then the raw body. Body is last so embedded
# newlines survive the split.
_GIT_LOG_FORMAT = "%H%n%P%n%aI%n%B"
_RECORD_SEP = "---CHANGELOG_SPINE_RECORD_SEP---"
_TAG_FORMAT = "%(refname:short)%09%(objectname)%09%(*objectname)"


@runtime_checkable
class GitBackend(Protocol):
    """The read-only queries the changelog engine needs."""

    def resolve_commit(self, tag_name: str) -> str: ...

    def log_between(self, from_commit: str | None, to_commit: str) -> list[CommitEntry]: ...

    def list_tags(self, variant_filter: Iterable[str]) -> list[BuildTag]: ...


class TagNameParser:
    """Turns tag names into build tags using a regex with ``build``/``variant`` groups.

    Examples:
        >>> parser = TagNameParser()
        >>> parser.parse("v1.2.5-release", "abc123")
        BuildTag(name='v1.2.5-release', build_number=5, variant='release', commit_sha='abc123')
        >>> parser.parse("nightly") is None
        True
    """

    def __init__(self, pattern: str | re.Pattern[str] = DEFAULT_TAG_PATTERN):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def parse(self, name: str, commit_sha: str | None = None) -> BuildTag | None:
        match = self.pattern.match(name)
        if match is None:
            return None
        build_number = int(match.group("build"))
        if build_number < 1:
            return None
        return BuildTag(
            name=name,
            build_number=build_number,
            variant=match.group("variant"),
            commit_sha=commit_sha,
        )


def sort_build_tags(tags: Iterable[BuildTag]) -> list[BuildTag]:
    """Most recent build first; equal build numbers by tag name, greatest first."""
    return sorted(tags, key=lambda t: (t.build_number, t.name), reverse=True)


class GitCommandExecutor:
    """Runs read-only ``git`` commands against a working copy.

    Args:
        repo_dir: Root (or any directory inside) of the repository.
        tag_parser: Parser deciding which tags are build tags.
        timeout: Seconds before a git call is treated as a failure.
    """

    def __init__(
        self,
        repo_dir: Path,
        *,
        tag_parser: TagNameParser | None = None,
        timeout: int = 30,
    ):
        self.repo_dir = repo_dir
        self.tag_parser = tag_parser or TagNameParser()
        self.timeout = timeout
        self._verified = False

    # -- public API ---------------------------------------------------------

    def resolve_commit(self, tag_name: str) -> str:
        """Return the commit SHA a tag points at (annotated tags are peeled).

        Raises:
            TagNotFoundError: If no such tag exists.
            RepositoryAccessError: If the repository cannot be read.
        """
        self._ensure_repository()
        result = self._run(
            ["rev-parse", "--verify", "--quiet", f"refs/tags/{tag_name}^{{commit}}"],
            check=False,
        )
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            raise TagNotFoundError(tag_name).with_context(repo_dir=str(self.repo_dir))
        return sha

    def log_between(self, from_commit: str | None, to_commit: str) -> list[CommitEntry]:
        """Commits reachable from ``to_commit`` but not from ``from_commit``, newest first.

        With ``from_commit`` None the whole history up to ``to_commit`` is
        returned.
        """
        self._ensure_repository()
        revision = f"{from_commit}..{to_commit}" if from_commit else to_commit
        result = self._run(["log", f"--format={_GIT_LOG_FORMAT}{_RECORD_SEP}", revision, "--"])
        commits = _parse_log(result.stdout)
        logger.debug(
            "git_log_read",
            revision=revision,
            commits=len(commits),
        )
        return commits

    def list_tags(self, variant_filter: Iterable[str]) -> list[BuildTag]:
        """Build tags whose variant is in ``variant_filter``, most recent first."""
        self._ensure_repository()
        variants = set(variant_filter)
        result = self._run(["for-each-ref", "refs/tags", f"--format={_TAG_FORMAT}"])

        tags: list[BuildTag] = []
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            name, object_sha, peeled_sha = (line.split("\t") + ["", ""])[:3]
            tag = self.tag_parser.parse(name, peeled_sha or object_sha)
            if tag is None:
                logger.debug("tag_skipped", tag=name, reason="pattern_mismatch")
                continue
            if tag.variant in variants:
                tags.append(tag)
        return sort_build_tags(tags)

    # -- internals ----------------------------------------------------------

    def _ensure_repository(self) -> None:
        if self._verified:
            return
        if not self.repo_dir.is_dir():
            raise RepositoryAccessError(
                f"Repository directory does not exist: {self.repo_dir}"
            ).with_context(repo_dir=str(self.repo_dir))
        result = self._run(["rev-parse", "--git-dir"], check=False)
        if result.returncode != 0:
            raise RepositoryAccessError(
                f"Not a git repository: {self.repo_dir}: {result.stderr.strip()}"
            ).with_context(repo_dir=str(self.repo_dir))
        self._verified = True

    def _run(self, args: list[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        cmd = ["git", *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                cwd=str(self.repo_dir),
                timeout=self.timeout,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise RepositoryAccessError(
                f"git invocation failed: {exc}", cause=exc
            ).with_context(repo_dir=str(self.repo_dir), command=" ".join(cmd))

        if check and result.returncode != 0:
            raise RepositoryAccessError(
                f"git {args[0]} failed ({result.returncode}): {result.stderr.strip()}"
            ).with_context(repo_dir=str(self.repo_dir), command=" ".join(cmd))
        return result


def _parse_log(output: str) -> list[CommitEntry]:
    commits: list[CommitEntry] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        lines = record.split("\n", 3)
        if len(lines) < 3:
            continue
        sha = lines[0].strip()
        parents = tuple(lines[1].split())
        date = lines[2].strip()
        body = lines[3].strip() if len(lines) > 3 else ""
        commits.append(CommitEntry(sha=sha, message=body, author_date=date, parents=parents))
    return commits


class FixtureGitExecutor:
    """In-memory history loaded from a JSON fixture, for tests and dry runs.

    Expected fixture structure::

        {
            "commits": [
                {"sha": "a1", "message": "PROJ-1: init", "date": "...", "parents": []},
                {"sha": "b2", "message": "chore: bump", "parents": ["a1"]}
            ],
            "tags": {"v1.0.1-release": "a1", "v1.0.2-release": "b2"}
        }

    Commits are listed oldest first. Reachability follows ``parents``.
    """

    def __init__(
        self,
        commits: Iterable[CommitEntry],
        tags: dict[str, str],
        *,
        tag_parser: TagNameParser | None = None,
    ):
        self.commits = list(commits)
        self.tags = dict(tags)
        self.tag_parser = tag_parser or TagNameParser()
        self._by_sha = {c.sha: c for c in self.commits}
        self._position = {c.sha: i for i, c in enumerate(self.commits)}

    @classmethod
    def from_file(cls, path: Path, *, tag_parser: TagNameParser | None = None) -> FixtureGitExecutor:
        if not path.is_file():
            raise RepositoryAccessError(f"Fixture repository not found: {path}").with_context(
                path=str(path)
            )
        try:
            raw: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RepositoryAccessError(
                f"Fixture repository is not valid JSON: {path}", cause=exc
            ).with_context(path=str(path))

        commits = [
            CommitEntry(
                sha=entry["sha"],
                message=entry.get("message", ""),
                author_date=entry.get("date", ""),
                parents=tuple(entry.get("parents", [])),
            )
            for entry in raw.get("commits", [])
        ]
        return cls(commits, raw.get("tags", {}), tag_parser=tag_parser)

    def resolve_commit(self, tag_name: str) -> str:
        sha = self.tags.get(tag_name)
        if sha is None:
            raise TagNotFoundError(tag_name)
        return sha

    def log_between(self, from_commit: str | None, to_commit: str) -> list[CommitEntry]:
        if to_commit not in self._by_sha:
            raise RepositoryAccessError(f"Unknown commit: {to_commit}")
        reachable = self._ancestors(to_commit)
        if from_commit is not None:
            if from_commit not in self._by_sha:
                raise RepositoryAccessError(f"Unknown commit: {from_commit}")
            reachable -= self._ancestors(from_commit)
        return sorted(
            (self._by_sha[sha] for sha in reachable),
            key=lambda c: self._position[c.sha],
            reverse=True,
        )

    def list_tags(self, variant_filter: Iterable[str]) -> list[BuildTag]:
        variants = set(variant_filter)
        tags = [
            tag
            for tag in (self.tag_parser.parse(name, sha) for name, sha in self.tags.items())
            if tag is not None and tag.variant in variants
        ]
        return sort_build_tags(tags)

    def _ancestors(self, sha: str) -> set[str]:
        seen: set[str] = set()
        stack = [sha]
        while stack:
            current = stack.pop()
            if current in seen or current not in self._by_sha:
                continue
            seen.add(current)
            stack.extend(self._by_sha[current].parents)
        return seen
