#!/usr/bin/env python3
"""Tests for the reference normalizer."""

import re
from unittest.mock import patch

import pytest

from rulescope.core.constants import Phase
from rulescope.core.validators import ValidationError
from rulescope.rules.normalize import (
    NormalizedRule,
    compile_condition,
    normalize_rule,
    normalize_rules,
)
from rulescope.rules.patterns import PatternMatcher


class TestCompileCondition:
    """Tests for compile_condition."""

    def test_regex(self):
        """Test compiled regexes are searched."""
        predicate = compile_condition(re.compile(r"\.css$"))
        assert predicate("/src/app.css")
        assert not predicate("/src/app.js")

    def test_path_prefix(self):
        """Test plain strings match as path prefixes."""
        predicate = compile_condition("/project/src")
        assert predicate("/project/src/app.js")
        assert not predicate("/project/node_modules/x.js")

    def test_glob(self):
        """Test strings with wildcards match as globs."""
        predicate = compile_condition("**/*.css")
        assert predicate("/project/src/styles/main.css")
        assert not predicate("/project/src/main.js")

    def test_callable(self):
        """Test callables are called with the path."""
        predicate = compile_condition(lambda path: path.endswith(".md"))
        assert predicate("/docs/readme.md")
        assert predicate("/docs/readme.txt") is False

    def test_list_is_any(self):
        """Test lists match when any element matches."""
        predicate = compile_condition([re.compile(r"\.png$"), re.compile(r"\.gif$")])
        assert predicate("/img/a.gif")
        assert not predicate("/img/a.svg")

    def test_mixed_list(self):
        """Test regexes, globs, prefixes and callables in one list."""
        predicate = compile_condition([
            re.compile(r"\.gif$"),
            "**/*.png",
            "/project/assets",
            lambda path: path.endswith(".svg"),
        ])
        assert predicate("/img/a.gif")
        assert predicate("/img/a.png")
        assert predicate("/project/assets/font.woff")
        assert predicate("/img/a.svg")
        assert not predicate("/img/a.bmp")

    def test_regex_uses_pattern_matcher(self):
        """Test regex conditions are added to a PatternMatcher."""
        regex = re.compile(r"\.css$")
        with patch.object(PatternMatcher, "add_regex_pattern", autospec=True,
                          side_effect=PatternMatcher.add_regex_pattern) as add_regex:
            predicate = compile_condition([regex, "**/*.scss"])
        add_regex.assert_called_once()
        assert add_regex.call_args.args[1] is regex
        assert predicate("/src/a.css")
        assert predicate("/src/a.scss")

    def test_and_or_not(self):
        """Test logical dict conditions."""
        predicate = compile_condition({
            "and": ["/project"],
            "or": [re.compile(r"\.js$"), re.compile(r"\.ts$")],
            "not": [re.compile("node_modules")],
        })
        assert predicate("/project/src/a.ts")
        assert not predicate("/project/node_modules/a.js")
        assert not predicate("/elsewhere/a.js")

    def test_unknown_logical_key(self):
        """Test unknown dict keys are rejected."""
        with pytest.raises(ValidationError):
            compile_condition({"xor": []})

    def test_unsupported_type(self):
        """Test unsupported condition types are rejected."""
        with pytest.raises(ValidationError):
            compile_condition(42)


class TestNormalizeRule:
    """Tests for normalize_rule."""

    def test_no_resource_keys(self):
        """Test rules without resource keys get no predicate."""
        assert normalize_rule({"processor": "x-loader"}).resource is None

    def test_test_condition(self):
        """Test the test key builds the predicate."""
        norm = normalize_rule({"test": re.compile(r"\.js$")})
        assert norm.resource("/a.js")
        assert not norm.resource("/a.css")

    def test_exclude_only(self):
        """Test an exclude-only rule accepts everything else."""
        norm = normalize_rule({"exclude": [re.compile(r"\.js$")]})
        assert norm.resource("/a.css")
        assert not norm.resource("/a.js")

    def test_include_and_exclude(self):
        """Test include and exclude combine."""
        norm = normalize_rule({
            "test": re.compile(r"\.js$"),
            "include": "/project/src",
            "exclude": "/project/src/vendor",
        })
        assert norm.resource("/project/src/app.js")
        assert not norm.resource("/project/src/vendor/lib.js")
        assert not norm.resource("/project/test/app.js")

    def test_phase_and_processors(self):
        """Test phase and processors are carried over."""
        norm = normalize_rule({"phase": "post", "processor": "a", "use": ["b", {"processor": "c"}]})
        assert norm.phase == Phase.POST
        assert norm.processors == ["a", "b", "c"]

    def test_default_phase(self):
        """Test rules without a phase are normal."""
        assert normalize_rule({}).phase == Phase.NORMAL

    def test_children(self):
        """Test children are normalized into matching branches."""
        norm = normalize_rule({"oneOf": [{}, {"sequence": [{}]}]})
        assert norm.sequence is None
        assert len(norm.one_of) == 2
        assert len(norm.one_of[1].sequence) == 1
        assert norm.one_of[0].one_of is None


class TestNormalizeRules:
    """Tests for normalize_rules."""

    def test_same_shape(self, rule_tree):
        """Test the normalized list mirrors the rule list."""
        normalized = normalize_rules(rule_tree.roots)
        assert len(normalized) == 3
        assert all(isinstance(n, NormalizedRule) for n in normalized)
        assert len(normalized[2].one_of) == 4

    def test_does_not_modify_rules(self, rule_tree):
        """Test the raw rules are left untouched."""
        before = [dict(rule) for rule in rule_tree.roots]
        normalize_rules(rule_tree.roots)
        assert rule_tree.roots == before

    def test_empty(self):
        """Test an empty list."""
        assert normalize_rules([]) == []
