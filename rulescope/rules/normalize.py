#!/usr/bin/env python3
"""Reference rule normalizer.

A RuleSet takes its normalizer as an injected dependency; any callable that
maps a rule list to a parallel list of NormalizedRule-like objects works.
This module provides a small default that understands the common resource
condition forms:

- compiled regex: searched against the resource path
- string: glob when it contains wildcards, absolute path prefix otherwise
- callable: called with the resource path
- list: matches if any element matches
- dict: ``and`` (all), ``or`` (any) and ``not`` (negation) sub-conditions

``test``, ``include`` and ``resource`` must all accept a path and
``exclude`` must reject it. A rule with none of these keys gets no resource
predicate.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from rulescope.core.constants import Phase, Rule, RuleKey, RuleList
from rulescope.core.validators import ValidationError
from rulescope.rules.matcher import processor_names, rule_phase
from rulescope.rules.patterns import PatternMatcher, is_glob

ResourcePredicate = Callable[[str], bool]


@dataclass
class NormalizedRule:
    """Shadow node paired by index with one raw rule."""

    resource: Optional[ResourcePredicate] = None
    phase: Phase = Phase.NORMAL
    processors: List[str] = field(default_factory=list)
    sequence: Optional[List["NormalizedRule"]] = None
    one_of: Optional[List["NormalizedRule"]] = None


def _is_pattern(condition: Any) -> bool:
    return isinstance(condition, re.Pattern) or (isinstance(condition, str) and is_glob(condition))


def _pattern_predicate(patterns: List[Any]) -> ResourcePredicate:
    matcher = PatternMatcher()
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            matcher.add_regex_pattern(pattern)
        else:
            matcher.add_glob_pattern(pattern)
    return matcher.matches


def compile_condition(condition: Any) -> ResourcePredicate:
    """Compile one resource condition into a predicate.

    Raises:
        ValidationError: If the condition has an unsupported type
    """
    if _is_pattern(condition):
        return _pattern_predicate([condition])

    if isinstance(condition, str):
        return lambda path: path.startswith(condition)

    if callable(condition):
        return lambda path: bool(condition(path))

    if isinstance(condition, (list, tuple)):
        # Regexes and globs share one matcher, the rest are checked one by one
        patterns = [c for c in condition if _is_pattern(c)]
        predicates = [compile_condition(c) for c in condition if not _is_pattern(c)]
        if patterns:
            predicates.insert(0, _pattern_predicate(patterns))
        return lambda path: any(p(path) for p in predicates)

    if isinstance(condition, dict):
        return _compile_logical(condition)

    raise ValidationError(f"Unsupported resource condition: {condition!r}")


def _compile_logical(condition: dict) -> ResourcePredicate:
    unknown = set(condition) - {"and", "or", "not"}
    if unknown:
        raise ValidationError(f"Unknown condition keys: {', '.join(sorted(unknown))}")

    predicates: List[ResourcePredicate] = []
    if "and" in condition:
        all_of = [compile_condition(c) for c in condition["and"]]
        predicates.append(lambda path: all(p(path) for p in all_of))
    if "or" in condition:
        any_of = [compile_condition(c) for c in condition["or"]]
        predicates.append(lambda path: any(p(path) for p in any_of))
    if "not" in condition:
        negated = compile_condition(condition["not"])
        predicates.append(lambda path: not negated(path))

    return lambda path: all(p(path) for p in predicates)


def _resource_predicate(rule: Rule) -> Optional[ResourcePredicate]:
    required = [
        compile_condition(rule[key])
        for key in (RuleKey.TEST, RuleKey.INCLUDE, RuleKey.RESOURCE)
        if rule.get(key) is not None
    ]
    exclude = (
        compile_condition(rule[RuleKey.EXCLUDE])
        if rule.get(RuleKey.EXCLUDE) is not None
        else None
    )

    if not required and exclude is None:
        return None

    def predicate(path: str) -> bool:
        if exclude is not None and exclude(path):
            return False
        return all(p(path) for p in required)

    return predicate


def normalize_rule(rule: Rule) -> NormalizedRule:
    """Normalize a single rule and its children."""
    sequence = rule.get(RuleKey.SEQUENCE)
    one_of = rule.get(RuleKey.ONE_OF)

    return NormalizedRule(
        resource=_resource_predicate(rule),
        phase=rule_phase(rule),
        processors=processor_names(rule),
        sequence=normalize_rules(sequence) if sequence is not None else None,
        one_of=normalize_rules(one_of) if one_of is not None else None,
    )


def normalize_rules(rules: RuleList) -> List[NormalizedRule]:
    """Build the parallel normalized tree for a rule list.

    Args:
        rules: Raw rule list

    Returns:
        NormalizedRule list with the same shape as ``rules``
    """
    return [normalize_rule(rule) for rule in rules]
