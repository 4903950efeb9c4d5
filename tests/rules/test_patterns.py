#!/usr/bin/env python3
"""Tests for glob and regex pattern matching."""

import re
from pathlib import PurePosixPath

import pytest

from rulescope.rules.patterns import (
    PatternMatcher,
    PatternType,
    glob_to_regex,
    is_glob,
    normalize_path,
)


class TestHelpers:
    """Tests for module helpers."""

    @pytest.mark.parametrize("pattern,expected", [
        ("*.js", True),
        ("src/?.css", True),
        ("[ab].md", True),
        ("/project/src", False),
        ("fake_file_name.css", False),
    ])
    def test_is_glob(self, pattern, expected):
        """Test wildcard detection."""
        assert is_glob(pattern) is expected

    def test_normalize_path(self):
        """Test separators are unified and the leading slash dropped."""
        assert normalize_path("/a/b.js") == "a/b.js"
        assert normalize_path("a\\b.js") == "a/b.js"
        assert normalize_path(PurePosixPath("/x/y")) == "x/y"

    def test_glob_to_regex_anchored(self):
        """Test translated globs are anchored."""
        regex = glob_to_regex("*.js")
        assert regex.startswith("^") and regex.endswith("$")


class TestPatternMatcher:
    """Tests for PatternMatcher."""

    def test_empty_matches_nothing(self):
        """Test a matcher without patterns matches nothing."""
        assert not PatternMatcher().matches("/a.js")

    @pytest.mark.parametrize("path,expected", [
        ("/app.css", True),
        ("/project/src/app.css", True),
        ("/project/src/deep/nested/app.css", True),
        ("/project/src/app.js", False),
    ])
    def test_double_star(self, path, expected):
        """Test ** spans any number of segments."""
        matcher = PatternMatcher()
        matcher.add_glob_pattern("**/*.css")
        assert matcher.matches(path) is expected

    def test_single_star_stays_in_segment(self):
        """Test * does not cross a separator."""
        matcher = PatternMatcher()
        matcher.add_glob_pattern("src/*.js")
        assert matcher.matches("/src/app.js")
        assert not matcher.matches("/src/lib/app.js")

    def test_trailing_double_star(self):
        """Test a trailing /** matches everything below a directory."""
        matcher = PatternMatcher()
        matcher.add_glob_pattern("/project/node_modules/**")
        assert matcher.matches("/project/node_modules/pkg/index.js")
        assert not matcher.matches("/project/src/index.js")

    def test_regex_sees_raw_path(self):
        """Test regexes search the path as given."""
        matcher = PatternMatcher()
        matcher.add_regex_pattern(re.compile(r"^/abs/.*\.ts$"))
        assert matcher.matches("/abs/a.ts")
        assert not matcher.matches("abs/a.ts")

    def test_regex_keeps_its_flags(self):
        """Test compiled regexes are used with their own flags."""
        matcher = PatternMatcher()
        matcher.add_regex_pattern(re.compile(r"\.JS$", re.IGNORECASE))
        assert matcher.matches("/a.js")

    def test_pattern_types(self):
        """Test pattern type values."""
        assert PatternType.GLOB.value == "glob"
        assert PatternType.REGEX.value == "regex"

    def test_any_pattern_matches(self):
        """Test patterns combine with OR."""
        matcher = PatternMatcher()
        matcher.add_glob_pattern("**/*.png")
        matcher.add_regex_pattern(re.compile(r"\.gif$"))
        assert matcher.matches("/img/a.gif")
        assert matcher.matches("/img/a.png")
        assert not matcher.matches("/img/a.svg")
