"""Tests for changelog_spine.changelog.tag_store."""

from __future__ import annotations

import json

import pytest

from changelog_spine.changelog.model import BuildTag
from changelog_spine.changelog.tag_store import (
    TagBuildRecord,
    load_tag_record,
    parse_tag_record,
    save_tag_record,
    tag_build_filename,
)
from changelog_spine.core.errors import TagRecordError


class TestParseTagRecord:
    def test_valid_record(self):
        tag = parse_tag_record('{"name": "v1.2.5-release", "buildNumber": 5, "variant": "release"}')
        assert tag == BuildTag("v1.2.5-release", 5, "release")

    def test_build_variant_alias(self):
        tag = parse_tag_record('{"name": "v1.2.5-debug", "buildNumber": 5, "buildVariant": "debug"}')
        assert tag.variant == "debug"

    def test_commit_sha_carried(self):
        tag = parse_tag_record('{"name": "a.1-x", "buildNumber": 1, "variant": "x", "commitSha": "abc"}')
        assert tag.commit_sha == "abc"

    def test_unknown_fields_ignored(self):
        tag = parse_tag_record('{"name": "a.1-x", "buildNumber": 1, "variant": "x", "extra": true}')
        assert tag.name == "a.1-x"

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[1, 2]",
            '{"name": "a.1-x", "variant": "x"}',
            '{"name": "", "buildNumber": 1, "variant": "x"}',
            '{"name": "a.0-x", "buildNumber": 0, "variant": "x"}',
            '{"name": "a.1-x", "buildNumber": 1}',
        ],
    )
    def test_malformed_records_rejected(self, text):
        with pytest.raises(TagRecordError):
            parse_tag_record(text)


class TestTagRecordFiles:
    def test_filename(self):
        assert tag_build_filename("googleRelease") == "tag-build-googleRelease.json"

    def test_save_writes_aliases(self, tmp_path):
        path = save_tag_record(tmp_path / "build" / "tag-build-release.json", BuildTag("v1.2.5-release", 5, "release"))
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"name": "v1.2.5-release", "buildNumber": 5, "variant": "release"}

    def test_save_then_load(self, tmp_path):
        tag = BuildTag("v1.2.5-release", 5, "release", commit_sha="abc")
        path = save_tag_record(tmp_path / "tag.json", tag)
        assert load_tag_record(path) == tag

    def test_missing_file(self, tmp_path):
        with pytest.raises(TagRecordError) as exc_info:
            load_tag_record(tmp_path / "missing.json")
        assert exc_info.value.context.path.endswith("missing.json")

    def test_malformed_file_reports_path(self, tmp_path):
        path = tmp_path / "tag.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(TagRecordError) as exc_info:
            load_tag_record(path)
        assert exc_info.value.context.path == str(path)


class TestTagBuildRecord:
    def test_populate_by_field_name(self):
        record = TagBuildRecord(name="a.1-x", build_number=1, variant="x")
        assert record.to_build_tag() == BuildTag("a.1-x", 1, "x")
