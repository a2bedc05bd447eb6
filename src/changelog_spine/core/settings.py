"""
Changelog configuration.

Manifesto:
    Configuration is an explicit value handed to the builder at
    construction time. There is no registry of named config sets inside
    the core: callers build one ``ChangelogSettings`` (from the
    environment, a TOML file or keyword overrides) and pass it down.

Values are resolved in this order (later wins):

1. Field defaults
2. ``.env`` file and ``CHANGELOG_SPINE_*`` environment variables
3. ``[changelog]`` table of a TOML file passed to :func:`load_settings`
4. Keyword overrides passed to :func:`load_settings`

Examples:
    >>> settings = ChangelogSettings(issue_url_prefix="https://jira.example.com/browse/")
    >>> settings.max_length
    2000

Tags:
    settings, configuration, pydantic, environment, changelog

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

import re
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InvalidConfigError

DEFAULT_COMMIT_MESSAGE_KEY = r"[A-Z][A-Z0-9]+-\d+"
DEFAULT_TAG_PATTERN = r"^(?P<prefix>.*\.)(?P<build>\d+)-(?P<variant>\S+)$"
MAX_CHANGELOG_SYMBOLS = 2000


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regular expression {pattern!r}: {exc}") from exc


class LinkStyle(str, Enum):
    """How issue keys are turned into links when a URL prefix is configured."""

    MARKDOWN = "markdown"
    SLACK = "slack"
    HTML = "html"
    PLAIN = "plain"


class ChangelogSettings(BaseSettings):
    """Changelog generation settings.

    All fields can be set via ``CHANGELOG_SPINE_*`` environment variables
    (e.g. ``CHANGELOG_SPINE_ISSUE_URL_PREFIX``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANGELOG_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Extraction ───────────────────────────────────────────────
    commit_message_key: str = Field(
        default=DEFAULT_COMMIT_MESSAGE_KEY,
        description="Regex extracting an issue key from a commit subject",
    )
    exclude_merges: bool = Field(default=True, description="Drop merge commits from the range")
    include_unkeyed: bool = Field(
        default=True,
        description="Keep commits without an issue key as plain entries",
    )

    # ── Rendering ────────────────────────────────────────────────
    issue_url_prefix: str | None = Field(default=None)
    issue_number_pattern: str | None = Field(
        default=None,
        description="Regex locating issue numbers to link; defaults to commit_message_key",
    )
    link_style: LinkStyle = Field(default=LinkStyle.MARKDOWN)
    bullet: str = Field(default="- ")
    max_length: int = Field(default=MAX_CHANGELOG_SYMBOLS, ge=1)
    ellipsis: str = Field(default="…")

    # ── Tags ─────────────────────────────────────────────────────
    tag_pattern: str = Field(
        default=DEFAULT_TAG_PATTERN,
        description="Regex with 'build' and 'variant' groups parsing a build tag name",
    )
    default_build_version: str = Field(default="v0.0.1")

    # ── Paths / git ──────────────────────────────────────────────
    build_dir: Path = Field(default=Path("build"))
    changelog_filename: str = Field(default="changelog.txt")
    git_timeout_seconds: int = Field(default=30, ge=1)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("commit_message_key", "issue_number_pattern")
    @classmethod
    def _check_regex(cls, value: str | None) -> str | None:
        if value is not None:
            _compile(value)
        return value

    @field_validator("tag_pattern")
    @classmethod
    def _check_tag_pattern(cls, value: str) -> str:
        compiled = _compile(value)
        missing = {"build", "variant"} - set(compiled.groupindex)
        if missing:
            raise ValueError(f"tag_pattern must define named groups: {sorted(missing)}")
        return value

    # ── Derived ──────────────────────────────────────────────────

    @property
    def issue_pattern(self) -> re.Pattern[str]:
        """Compiled commit-message key."""
        return re.compile(self.commit_message_key)

    @property
    def link_pattern(self) -> re.Pattern[str]:
        """Compiled pattern used for link substitution."""
        return re.compile(self.issue_number_pattern or self.commit_message_key)

    @property
    def tag_regex(self) -> re.Pattern[str]:
        return re.compile(self.tag_pattern)

    @property
    def changelog_path(self) -> Path:
        return self.build_dir / self.changelog_filename


def load_settings(path: Path | None = None, **overrides: Any) -> ChangelogSettings:
    """Build settings from the environment, an optional TOML file and overrides.

    The TOML file may hold the values at top level or under a
    ``[changelog]`` table::

        [changelog]
        commit_message_key = "PROJ-\\\\d+"
        issue_url_prefix = "https://jira.example.com/browse/"

    Args:
        path: TOML file to read. Missing files are a configuration error.
        **overrides: Explicit values; ``None`` values are ignored.

    Raises:
        InvalidConfigError: If the file is missing or not valid TOML.
    """
    values: dict[str, Any] = {}
    if path is not None:
        if not path.is_file():
            raise InvalidConfigError("settings_file", str(path), f"Settings file not found: {path}")
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise InvalidConfigError("settings_file", str(path), f"Invalid TOML in {path}: {exc}") from exc
        values.update(data.get("changelog", data))

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ChangelogSettings(**values)


__all__ = [
    "ChangelogSettings",
    "LinkStyle",
    "load_settings",
    "DEFAULT_COMMIT_MESSAGE_KEY",
    "DEFAULT_TAG_PATTERN",
    "MAX_CHANGELOG_SYMBOLS",
]
