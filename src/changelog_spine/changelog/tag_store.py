"""Persisted tag-build records.

Stability: stable
Tier: none
Since: 0.1.0
Dependencies: pydantic
Doc-Types: API_REFERENCE
Tags: changelog, tag, persistence, json

The build writes the tag it resolved for a variant to
``<build_dir>/tag-build-<variant>.json``; the next step (changelog
generation, version naming) reads it back. Record format::

    {"name": "v1.2.5-release", "buildNumber": 5, "variant": "release"}

``buildVariant`` is accepted as an alias of ``variant`` and an optional
``commitSha`` is carried through when present.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from changelog_spine.core.errors import TagRecordError
from changelog_spine.core.logging import get_logger

from .model import BuildTag

logger = get_logger(__name__)


class TagBuildRecord(BaseModel):
    """On-disk shape of a build tag."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: str = Field(min_length=1)
    build_number: int = Field(alias="buildNumber", ge=1)
    variant: str = Field(min_length=1)
    commit_sha: str | None = Field(default=None, alias="commitSha")

    @classmethod
    def from_build_tag(cls, tag: BuildTag) -> TagBuildRecord:
        return cls(
            name=tag.name,
            build_number=tag.build_number,
            variant=tag.variant,
            commit_sha=tag.commit_sha,
        )

    def to_build_tag(self) -> BuildTag:
        return BuildTag(
            name=self.name,
            build_number=self.build_number,
            variant=self.variant,
            commit_sha=self.commit_sha,
        )


def tag_build_filename(variant: str) -> str:
    """File name of the tag record for ``variant``."""
    return f"tag-build-{variant}.json"


def parse_tag_record(text: str, *, source: str = "<string>") -> BuildTag:
    """Parse a JSON tag record into a :class:`BuildTag`.

    Raises:
        TagRecordError: If the text is not JSON or lacks required fields.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TagRecordError(f"Tag record is not valid JSON: {exc}", cause=exc).with_context(path=source)

    if not isinstance(data, dict):
        raise TagRecordError("Tag record must be a JSON object").with_context(path=source)

    # Older records name the field after the build system's variant type.
    if "variant" not in data and "buildVariant" in data:
        data = {**data, "variant": data["buildVariant"]}

    try:
        record = TagBuildRecord.model_validate(data)
    except ValidationError as exc:
        raise TagRecordError(f"Invalid tag record: {exc}", cause=exc).with_context(path=source)
    return record.to_build_tag()


def load_tag_record(path: Path) -> BuildTag:
    """Read the tag record at ``path``.

    Raises:
        TagRecordError: If the file is missing or malformed.
    """
    if not path.is_file():
        raise TagRecordError(f"Tag record not found: {path}").with_context(path=str(path))
    tag = parse_tag_record(path.read_text(encoding="utf-8"), source=str(path))
    logger.debug("tag_record_loaded", path=str(path), tag=tag.name, build_number=tag.build_number)
    return tag


def save_tag_record(path: Path, tag: BuildTag) -> Path:
    """Write ``tag`` to ``path`` as a JSON record, creating parent directories."""
    record = TagBuildRecord.from_build_tag(tag)
    payload = record.model_dump(by_alias=True, exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.debug("tag_record_saved", path=str(path), tag=tag.name)
    return path
