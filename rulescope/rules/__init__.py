"""rulescope Rules System.

This module provides rule-tree traversal, matching and editing:
- RuleMatcher: Criterion shapes unified into one rule test
- walk / walk_all: Lock-step traversal of rules and their normalized shadow
- RuleSet: Filtering, single-rule lookup and positional insertion
- normalize_rules: Reference normalizer building the shadow tree
- PatternMatcher: Glob and regex matching used by the normalizer
"""

from .matcher import Criterion, MatchSettings, RuleMatcher, processor_names, rule_phase
from .normalize import NormalizedRule, compile_condition, normalize_rules
from .patterns import PatternMatcher, PatternType
from .ruleset import CountMismatchError, InsertPosition, RuleSet, RuleSetError
from .walker import walk, walk_all, walk_root

__all__ = [
    # Matching
    "Criterion",
    "MatchSettings",
    "RuleMatcher",
    "processor_names",
    "rule_phase",
    # Traversal
    "walk",
    "walk_all",
    "walk_root",
    # Rule set
    "RuleSet",
    "RuleSetError",
    "CountMismatchError",
    "InsertPosition",
    # Normalization
    "NormalizedRule",
    "compile_condition",
    "normalize_rules",
    "PatternMatcher",
    "PatternType",
]
