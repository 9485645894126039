"""Unit tests for field annotations and name tag parsing."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from schemagen.tags import EMPTY_TAGS, Tags, parse_name_tag


class TestTags:
    """Tests for the Tags mapping."""

    def test_values_are_strings(self) -> None:
        """Non-string values should be stored as their string form."""
        tags = Tags(minLength=3, min=1.5, pattern="a+")
        assert tags["minLength"] == "3"
        assert tags["min"] == "1.5"
        assert tags["pattern"] == "a+"

    def test_accepts_mapping_and_keywords(self) -> None:
        """Tags should combine a positional mapping with keywords."""
        tags = Tags({"json": "id", "description": "old"}, description="new")
        assert dict(tags) == {"json": "id", "description": "new"}

    def test_lookup_distinguishes_empty_from_absent(self) -> None:
        """lookup should report presence independently of the value."""
        tags = Tags(required="")
        assert tags.lookup("required") == ("", True)
        assert tags.lookup("description") == ("", False)

    def test_get_returns_none_when_absent(self) -> None:
        """Mapping.get should work as usual."""
        assert Tags().get("json") is None
        assert EMPTY_TAGS.get("json", "") == ""

    def test_merged_keeps_own_values(self) -> None:
        """merged should add missing keys but keep existing ones."""
        tags = Tags(json="id").merged({"json": "other", "description": "x"})
        assert tags["json"] == "id"
        assert tags["description"] == "x"

    def test_merged_with_empty_returns_self(self) -> None:
        """Merging nothing should return the same instance."""
        tags = Tags(json="id")
        assert tags.merged({}) is tags

    def test_equality_and_hash(self) -> None:
        """Equal tags should compare and hash equal."""
        assert Tags(json="id", minLength=1) == Tags(minLength="1", json="id")
        assert hash(Tags(json="id")) == hash(Tags(json="id"))

    def test_usable_as_dataclass_metadata(self) -> None:
        """Tags should be accepted as dataclass field metadata."""

        @dataclass
        class Sample:
            value: str = field(default="", metadata=Tags(json="v,omitempty"))

        assert fields(Sample)[0].metadata["json"] == "v,omitempty"


class TestParseNameTag:
    """Tests for parse_name_tag."""

    def test_name_only(self) -> None:
        """A tag without options should return just the name."""
        assert parse_name_tag("id") == ("id", frozenset())

    def test_name_with_options(self) -> None:
        """Options after the first comma should be returned as a set."""
        assert parse_name_tag("id,omitempty") == ("id", frozenset({"omitempty"}))

    def test_empty_name_with_options(self) -> None:
        """An empty name should be preserved for the caller to fill in."""
        name, options = parse_name_tag(",foo,omitempty")
        assert name == ""
        assert "omitempty" in options
        assert "foo" in options

    def test_skip_sentinel(self) -> None:
        """The skip sentinel should be returned as the name."""
        assert parse_name_tag("-")[0] == "-"
        assert parse_name_tag("-,omitempty")[0] == "-"

    def test_empty_tag(self) -> None:
        """An empty tag should produce no name and no options."""
        assert parse_name_tag("") == ("", frozenset())
