"""
Structured error types for changelog-spine.

Every failure that crosses a module boundary is a ``ChangelogSpineError``
subclass carrying a category, a retry flag, structured context and an
optional chained cause. Callers (CI glue, the CLI) decide what to do with
the error; the core never turns a repository failure into an empty
changelog.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────┐
        │                   ChangelogSpineError                      │
        │       (category, retryable, context, cause)                │
        ├───────────────────────────────────────────────────────────┤
        │                                                            │
        │  SourceError              ConfigError                      │
        │  (SOURCE)                 (CONFIG)                         │
        │     │                        │                             │
        │  SourceNotFoundError      MissingConfigError               │
        │     └ TagNotFoundError    InvalidConfigError               │
        │  RepositoryAccessError                                     │
        │  ParseError                                                │
        │     └ TagRecordError                                       │
        └───────────────────────────────────────────────────────────┘

Examples:
    >>> error = TagNotFoundError("v1.2.0")
    >>> error.tag_name
    'v1.2.0'
    >>> error.category
    <ErrorCategory.SOURCE: 'SOURCE'>

    Adding context fluently:

    >>> err = RepositoryAccessError("not a git repository")
    >>> err.with_context(repo_dir="/tmp/x").context.repo_dir
    '/tmp/x'

Tags:
    error-handling, exception-hierarchy, error-context, changelog
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    SOURCE = "SOURCE"             # Repository, tag lookup
    PARSE = "PARSE"               # Tag record / git output parsing
    CONFIG = "CONFIG"             # Bad patterns, missing settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        repo_dir: Repository the failing query ran against.
        tag_name: Tag involved in the failure.
        variant: Build variant being processed.
        command: Git command line (joined) that failed.
        path: File involved (tag record, settings file).
        metadata: Additional key-value pairs.
    """

    repo_dir: str | None = None
    tag_name: str | None = None
    variant: str | None = None
    command: str | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["repo_dir", "tag_name", "variant", "command", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class ChangelogSpineError(Exception):
    """
    Base exception for all changelog-spine errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    call sites only pass a message (and optionally a cause).

    Examples:
        >>> error = ChangelogSpineError("Something went wrong")
        >>> error.retryable
        False
        >>> error.to_dict()["category"]
        'INTERNAL'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ChangelogSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RepositoryAccessError("git log failed").with_context(
                repo_dir=str(repo_dir),
                command="git log",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(ChangelogSpineError):
    """
    Error from the version-control source.

    Not retryable: git queries are local and deterministic.
    """

    default_category = ErrorCategory.SOURCE
    default_retryable = False


class SourceNotFoundError(SourceError):
    """Requested object (tag, commit, file) does not exist."""

    pass


class TagNotFoundError(SourceNotFoundError):
    """A referenced tag does not exist in the repository."""

    def __init__(self, tag_name: str, message: str | None = None, **kwargs: Any):
        self.tag_name = tag_name
        super().__init__(message or f"Tag not found in repository: {tag_name}", **kwargs)
        self.context.tag_name = tag_name


class RepositoryAccessError(SourceError):
    """The backing repository cannot be read (missing, corrupt, wrong directory)."""

    pass


class ParseError(SourceError):
    """Error parsing source data."""

    default_category = ErrorCategory.PARSE


class TagRecordError(ParseError):
    """A persisted tag-build record is missing fields or malformed."""

    pass


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ChangelogSpineError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, ChangelogSpineError):
        return error.category
    if isinstance(error, ValueError):
        return ErrorCategory.PARSE
    if isinstance(error, OSError):
        return ErrorCategory.SOURCE
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ChangelogSpineError",
    "SourceError",
    "SourceNotFoundError",
    "TagNotFoundError",
    "RepositoryAccessError",
    "ParseError",
    "TagRecordError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "categorize_error",
]
