#!/usr/bin/env python3
"""Rule matching for rule trees.

A criterion comes in one of several shapes and is turned into a
RuleMatcher holding up to four clauses:

- phase: the rule's phase tag (``normal`` when absent) equals the requested one
- predicate: a caller function ``(rule, normalized_rule) -> bool``
- processor: a fragment found in the rule's ``processor`` or any ``use`` entry
- resource: the normalized rule's resource predicate accepts a path

Clauses are evaluated in that order and the first failure stops evaluation.
Absent clauses pass, so a descriptor with no recognised keys matches every
rule.

Example:
    >>> matcher = RuleMatcher.coerce("babel-loader")
    >>> matcher.test({"processor": "/path/to/babel-loader"}, None)
    True
    >>> RuleMatcher.coerce(".css").resource_path()
    '/current/dir/fake_file_name.css'
"""

import os
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple, Union

from rulescope.core.constants import (
    DEFAULT_EXTENSION_PATTERN,
    DEFAULT_FAKE_FILE_NAME,
    DEFAULT_PROCESSOR_SUFFIXES,
    ConfigKey,
    CriterionKey,
    Phase,
    Rule,
    RuleKey,
)
from rulescope.core.validators import ValidationError, validate_phase

Predicate = Callable[[Rule, Any], Any]
Visitor = Callable[[Rule, Any, Optional[list]], Any]
Action = Callable[[Rule, Optional[list]], Any]

# Evaluation order of the clauses; cheaper checks come first
CLAUSE_ORDER = ("phase", "predicate", "processor", "resource")


@dataclass(frozen=True)
class MatchSettings:
    """Tunables for interpreting string criteria."""

    fake_file_name: str = DEFAULT_FAKE_FILE_NAME
    extension_pattern: str = DEFAULT_EXTENSION_PATTERN
    processor_suffixes: Tuple[str, ...] = DEFAULT_PROCESSOR_SUFFIXES
    default_phase: Phase = Phase.NORMAL

    @classmethod
    def from_config(cls, config: Any = None) -> "MatchSettings":
        """Read settings from a ConfigManager (the global one by default)."""
        if config is None:
            from rulescope.infrastructure.config_manager import get_config_manager

            config = get_config_manager()

        suffixes = config.get(ConfigKey.PROCESSOR_SUFFIXES, list(DEFAULT_PROCESSOR_SUFFIXES))
        if isinstance(suffixes, str):
            suffixes = [suffixes]

        return cls(
            fake_file_name=config.get(ConfigKey.FAKE_FILE_NAME, DEFAULT_FAKE_FILE_NAME),
            extension_pattern=config.get(ConfigKey.EXTENSION_PATTERN, DEFAULT_EXTENSION_PATTERN),
            processor_suffixes=tuple(suffixes),
            default_phase=Phase.parse(config.get(ConfigKey.DEFAULT_PHASE, Phase.NORMAL.value)),
        )

    def looks_like_processor(self, value: str) -> bool:
        return any(value.endswith(suffix) for suffix in self.processor_suffixes)

    def is_bare_extension(self, value: str) -> bool:
        return re.match(self.extension_pattern, value) is not None


DEFAULT_SETTINGS = MatchSettings()


@dataclass
class Criterion:
    """Descriptor criterion; any subset of fields may be set."""

    predicate: Optional[Predicate] = None
    processor: Optional[str] = None
    phase: Optional[Union[Phase, str]] = None
    resource: Optional[str] = None


def processor_names(rule: Rule) -> List[str]:
    """Flatten a rule's ``processor`` and ``use`` entries into a list of references."""
    names: List[str] = []
    if rule.get(RuleKey.PROCESSOR):
        names.append(str(rule[RuleKey.PROCESSOR]))

    uses = rule.get(RuleKey.USE) or []
    if not isinstance(uses, list):
        uses = [uses]
    for entry in uses:
        if isinstance(entry, dict):
            if entry.get(RuleKey.PROCESSOR):
                names.append(str(entry[RuleKey.PROCESSOR]))
        elif entry:
            names.append(str(entry))
    return names


def rule_phase(rule: Rule) -> Phase:
    """Phase tag of a raw rule, ``normal`` when absent."""
    return Phase.parse(rule.get(RuleKey.PHASE) or Phase.NORMAL)


class RuleMatcher:
    """Tests rules against a criterion.

    Build one through ``coerce`` or one of the ``from_*`` constructors.
    """

    def __init__(
        self,
        phase: Optional[Union[Phase, str]] = None,
        predicate: Optional[Predicate] = None,
        processor: Optional[str] = None,
        resource: Optional[str] = None,
        settings: MatchSettings = DEFAULT_SETTINGS,
    ):
        if phase is not None:
            validate_phase(phase)
            phase = Phase.parse(phase)
        if predicate is not None and not callable(predicate):
            raise ValidationError(f"Criterion predicate must be callable: {predicate!r}")

        self.phase: Optional[Phase] = phase
        self.predicate = predicate
        # Empty strings leave their clause out
        self.processor = processor or None
        self.resource = resource or None
        self.settings = settings

    @classmethod
    def from_predicate(cls, predicate: Predicate,
                       settings: MatchSettings = DEFAULT_SETTINGS) -> "RuleMatcher":
        return cls(predicate=predicate, settings=settings)

    @classmethod
    def from_string(cls, value: str, settings: MatchSettings = DEFAULT_SETTINGS) -> "RuleMatcher":
        """Processor fragment when it ends with a processor suffix, resource path otherwise."""
        if settings.looks_like_processor(value):
            return cls(processor=value, settings=settings)
        return cls(resource=value, settings=settings)

    @classmethod
    def from_descriptor(cls, descriptor: Union[Criterion, Mapping[str, Any]],
                        settings: MatchSettings = DEFAULT_SETTINGS) -> "RuleMatcher":
        """Build from a Criterion or a dict; unrecognised dict keys are ignored."""
        if isinstance(descriptor, Criterion):
            fields = {
                CriterionKey.PREDICATE: descriptor.predicate,
                CriterionKey.PROCESSOR: descriptor.processor,
                CriterionKey.PHASE: descriptor.phase,
                CriterionKey.RESOURCE: descriptor.resource,
            }
        else:
            fields = {key: descriptor.get(key) for key in CriterionKey.ALL}
        return cls(settings=settings, **fields)

    @classmethod
    def coerce(cls, criterion: Any, settings: Optional[MatchSettings] = None) -> "RuleMatcher":
        """Turn any supported criterion shape into a RuleMatcher.

        Args:
            criterion: RuleMatcher, string, Criterion, dict or predicate
            settings: Settings for new matchers; existing matchers keep theirs

        Raises:
            TypeError: If the criterion has none of the supported shapes
        """
        if isinstance(criterion, RuleMatcher):
            return criterion

        settings = settings or DEFAULT_SETTINGS
        if isinstance(criterion, str):
            return cls.from_string(criterion, settings)
        if isinstance(criterion, (Criterion, Mapping)):
            return cls.from_descriptor(criterion, settings)
        if callable(criterion):
            return cls.from_predicate(criterion, settings)

        raise TypeError(f"Unsupported criterion type: {type(criterion).__name__}")

    def with_phase(self, phase: Union[Phase, str]) -> "RuleMatcher":
        """Copy of this matcher with the phase clause replaced."""
        return RuleMatcher(
            phase=phase,
            predicate=self.predicate,
            processor=self.processor,
            resource=self.resource,
            settings=self.settings,
        )

    def resource_path(self) -> Optional[str]:
        """Absolute candidate path for the resource clause.

        A bare extension such as ``.css`` becomes ``fake_file_name.css`` so
        extension-only matching works without a real file.
        """
        if self.resource is None:
            return None
        name = self.resource
        if self.settings.is_bare_extension(name):
            name = f"{self.settings.fake_file_name}{name}"
        return os.path.abspath(os.path.join(os.getcwd(), name))

    def _clauses(self) -> Iterator[Callable[[Rule, Any], bool]]:
        for clause in CLAUSE_ORDER:
            if getattr(self, clause) is not None:
                yield getattr(self, f"_check_{clause}")

    def _check_phase(self, rule: Rule, normalized_rule: Any) -> bool:
        return rule_phase(rule) == self.phase

    def _check_predicate(self, rule: Rule, normalized_rule: Any) -> bool:
        return bool(self.predicate(rule, normalized_rule))

    def _check_processor(self, rule: Rule, normalized_rule: Any) -> bool:
        return any(self.processor in name for name in processor_names(rule))

    def _check_resource(self, rule: Rule, normalized_rule: Any) -> bool:
        resource_test = getattr(normalized_rule, "resource", None)
        if resource_test is None:
            return False
        return bool(resource_test(self.resource_path()))

    def test(self, rule: Rule, normalized_rule: Any) -> bool:
        """Check a rule against every present clause.

        Args:
            rule: Raw rule from the caller's tree
            normalized_rule: Its normalized counterpart (may be None)

        Returns:
            True if every present clause passes
        """
        return all(clause(rule, normalized_rule) for clause in self._clauses())

    def actionable(self, action: Action) -> Visitor:
        """Wrap an action into a walker visitor.

        The visitor runs ``action(rule, parent)`` on a match and returns the
        match result, never the action's return value.
        """
        def visitor(rule: Rule, normalized_rule: Any, parent: Optional[list]) -> bool:
            is_match = self.test(rule, normalized_rule)
            if is_match:
                action(rule, parent)
            return is_match

        return visitor

    def __repr__(self) -> str:
        parts = [
            f"{clause}={getattr(self, clause)!r}"
            for clause in CLAUSE_ORDER
            if getattr(self, clause) is not None
        ]
        return f"RuleMatcher({', '.join(parts)})"
