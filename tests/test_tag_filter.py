"""Tests for the regex tag filter."""

import re
from datetime import datetime, timezone

import pytest

from policy.errors import InvalidPatternError
from policy.filter import FilteredView, RegexFilter, apply_filter, expand_template
from policy.models import Tag, TagFilterSpec


def _names(tags):
    return sorted(t.name for t in tags)


COMPLEX_TAGS = [
    Tag("123-123.123.abcd123-debug"),
    Tag("123-123.123.abcd123"),
    Tag("123-123.123.abcd456-debug"),
    Tag("123-123.123.abcd456"),
]


class TestRegexFilter:
    """Tests for RegexFilter.apply."""

    @pytest.mark.parametrize(
        "tags,pattern,extract,expected",
        [
            ([Tag("a")], "", "", ["a"]),
            ([Tag("ver1"), Tag("ver2"), Tag("ver3"), Tag("rel1")], "^ver", "", ["ver1", "ver2", "ver3"]),
            ([Tag("ver1"), Tag("ver2"), Tag("ver3"), Tag("rel1")], r"ver(\d+)", "$1", ["1", "2", "3"]),
            (
                COMPLEX_TAGS,
                r"^(123-[0-9]+\.[0-9]+\.[a-z0-9]+-debug)",
                "",
                ["123-123.123.abcd123-debug", "123-123.123.abcd456-debug"],
            ),
            (
                COMPLEX_TAGS,
                r"^(?P<tag>123-[0-9]+\.[0-9]+\.[a-z0-9]+[^-debug])",
                "$tag",
                ["123-123.123.abcd123", "123-123.123.abcd456"],
            ),
            (
                COMPLEX_TAGS,
                r"^(?P<tag>123-[0-9]+\.[0-9]+\.[a-z0-9]+$)",
                "$tag",
                ["123-123.123.abcd123", "123-123.123.abcd456"],
            ),
        ],
        ids=["none", "pattern", "capture-group", "complex-1", "complex-2", "complex-3"],
    )
    def test_apply(self, tags, pattern, extract, expected):
        """Filtered items hold the extracted names of the matching tags."""
        view = RegexFilter(pattern, extract).apply(tags)
        assert _names(view.items()) == expected

    def test_invalid_pattern(self):
        """A pattern that does not compile is a configuration error."""
        with pytest.raises(InvalidPatternError):
            RegexFilter("ver(", "")

    def test_empty_tag_list(self):
        """Filtering nothing gives an empty view."""
        view = RegexFilter("^v", "").apply([])
        assert len(view) == 0
        assert view.items() == []

    def test_search_is_unanchored(self):
        """Patterns match anywhere in the name unless anchored."""
        view = RegexFilter("rc", "").apply([Tag("1.0-rc1"), Tag("1.0")])
        assert _names(view.items()) == ["1.0-rc1"]

    def test_reverse_lookup(self):
        """Extracted tags map back to their original tag."""
        tags = [Tag("ver1"), Tag("ver2"), Tag("rel1")]
        view = RegexFilter(r"ver(\d+)", "$1").apply(tags)
        assert view.get_original(Tag("2")) == Tag("ver2")
        with pytest.raises(KeyError):
            view.get_original(Tag("rel1"))

    def test_created_time_is_kept(self):
        """Extracted tags carry the creation time of their original."""
        created = datetime(2024, 1, 27, 3, 7, tzinfo=timezone.utc)
        view = RegexFilter(r"^v(.*)", "$1").apply([Tag("v1", created)])
        assert view.items()[0].created == created

    def test_collision_last_tag_wins(self):
        """When two tags extract to the same name the later one is kept."""
        tags = [Tag("123-123.123.abcd123-debug"), Tag("123-123.123.abcd123")]
        view = RegexFilter(r"^(?P<tag>123-[0-9]+\.[0-9]+\.[a-z0-9]+[^-debug])", "$tag").apply(tags)
        assert len(view) == 1
        assert view.get_original(Tag("123-123.123.abcd123")).name == "123-123.123.abcd123"

        view = RegexFilter(r"^(?P<tag>123-[0-9]+\.[0-9]+\.[a-z0-9]+[^-debug])", "$tag").apply(list(reversed(tags)))
        assert view.get_original(Tag("123-123.123.abcd123")).name == "123-123.123.abcd123-debug"


class TestExpandTemplate:
    """Tests for capture group substitution."""

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("$1", "1"),
            ("${1}", "1"),
            ("$major.$minor", "1.2"),
            ("${major}-x", "1-x"),
            ("$$1", "$1"),
            ("$9", ""),
            ("$missing", ""),
            ("v$1x", "v"),
        ],
    )
    def test_expand(self, template, expected):
        """Templates expand numbered and named groups."""
        match = re.search(r"(?P<major>\d+)\.(?P<minor>\d+)", "release-1.2")
        assert expand_template(match, template) == expected

    def test_unmatched_optional_group(self):
        """An optional group that did not participate expands to empty text."""
        match = re.search(r"v(\d+)(-rc)?", "v3")
        assert expand_template(match, "$1$2") == "3"


class TestApplyFilter:
    """Tests for apply_filter."""

    def test_none_spec_keeps_all(self):
        """Without a filter spec every tag passes through unchanged."""
        view = apply_filter([Tag("a"), Tag("b")], None)
        assert _names(view.items()) == ["a", "b"]

    def test_spec(self):
        """A filter spec is compiled and applied."""
        view = apply_filter([Tag("v1.0"), Tag("latest")], TagFilterSpec(pattern=r"^v(.*)", extract="$1"))
        assert _names(view.items()) == ["1.0"]
        assert isinstance(view, FilteredView)
        assert "1.0" in view
