#!/usr/bin/env python3
"""Query and edit a caller-owned rule tree.

The RuleSet keeps a reference to the caller's root rule list, never a copy,
so edits made through it are visible in the caller's configuration. The
normalized shadow tree is computed once at construction and never
refreshed: after inserting rules, build a new RuleSet if later lookups need
resource matching on the edited branches.

Example:
    >>> rules = [
    ...     {"test": re.compile(r"\\.js$"), "phase": "pre", "processor": "eslint-loader"},
    ...     {"oneOf": [
    ...         {"test": re.compile(r"\\.js$"), "processor": "babel-loader"},
    ...         {"test": re.compile(r"\\.css$"), "use": ["style-loader", "css-loader"]},
    ...     ]},
    ... ]
    >>> ruleset = RuleSet(rules)
    >>> ruleset.get_exactly_one(".css")["use"]
    ['style-loader', 'css-loader']
    >>> ruleset.insert_before("babel-loader", {"processor": "thread-loader"})
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Union

from rulescope.core.constants import ErrorCode, Phase, Rule, RuleList
from rulescope.core.validators import validate_rule_tree, validate_shape
from rulescope.infrastructure.logger import Logger, get_logger
from rulescope.rules.matcher import Action, MatchSettings, RuleMatcher, Visitor
from rulescope.rules.normalize import normalize_rules
from rulescope.rules.walker import walk_all, walk_root

Normalizer = Callable[[RuleList], List[Any]]
InsertSpec = Union[Rule, Callable[[Rule, List[Rule]], Rule]]


class InsertPosition(Enum):
    """Where a new rule lands relative to the matched one."""

    BEFORE = "before"
    AFTER = "after"


class RuleSetError(Exception):
    """Base error for RuleSet operations."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class CountMismatchError(RuleSetError):
    """A lookup expecting an exact number of rules found a different number."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        noun = "rule" if expected == 1 else "rules"
        error_code = ErrorCode.NOT_FOUND if actual < expected else ErrorCode.CONFLICT
        super().__init__(f"Expected {expected} {noun} but found {actual}!", error_code)


def assert_found_count(found: List[Any], expected: int) -> None:
    """Raise CountMismatchError unless ``found`` holds exactly ``expected`` items."""
    if len(found) != expected:
        raise CountMismatchError(expected, len(found))


class RuleSet:
    """Rule tree paired with its normalized shadow.

    Lookups accept any criterion RuleMatcher.coerce understands: a
    predicate, a processor-name or resource string, a Criterion or dict
    descriptor, or a RuleMatcher.
    """

    def __init__(
        self,
        rules: RuleList,
        normalizer: Normalizer = normalize_rules,
        settings: Optional[MatchSettings] = None,
        logger: Optional[Logger] = None,
    ):
        """Initialize the rule set.

        Args:
            rules: Caller-owned root rule list, mutated in place by inserts
            normalizer: Maps ``rules`` to a parallel normalized list; called once
            settings: String criterion settings, read from config when omitted
            logger: Logger instance, global logger when omitted

        Raises:
            ValidationError: If the tree cannot be traversed or the normalized
                tree does not mirror it
        """
        self.logger = logger or get_logger()
        validate_rule_tree(rules)

        self.rules = rules
        self.normalized_rules = normalizer(rules)
        validate_shape(rules, self.normalized_rules)

        self.settings = settings or MatchSettings.from_config()
        self.logger.debug("RuleSet created", root_rules=len(rules))

    def matcher(self, criterion: Any) -> RuleMatcher:
        """Coerce a criterion using this rule set's settings."""
        return RuleMatcher.coerce(criterion, self.settings)

    def for_each_first_match(self, visitor: Visitor) -> bool:
        """Visit rules, stopping each ``oneOf`` at its first matching child.

        The visitor also sees the synthetic root ``{"sequence": rules}``.

        Returns:
            True if the visitor matched anywhere
        """
        return walk_root(visitor, self.rules, self.normalized_rules)

    def for_each_all(self, visitor: Visitor) -> None:
        """Visit every rule, synthetic root included, whatever the visitor returns."""
        walk_all(visitor, self.rules, self.normalized_rules)

    def match_first(self, criterion: Any, action: Action) -> None:
        """Call ``action(rule, parent)`` for matches, first match only per ``oneOf``."""
        self.for_each_first_match(self.matcher(criterion).actionable(action))

    def match_all(self, criterion: Any, action: Action) -> None:
        """Call ``action(rule, parent)`` for every matching rule."""
        self.for_each_all(self.matcher(criterion).actionable(action))

    def filter_first(self, criterion: Any) -> List[Rule]:
        """Matching rules in traversal order, first match only per ``oneOf``."""
        matches: List[Rule] = []
        self.match_first(criterion, lambda rule, parent: matches.append(rule))
        return matches

    def filter_all(self, criterion: Any) -> List[Rule]:
        """Every matching rule in traversal order."""
        matches: List[Rule] = []
        self.match_all(criterion, lambda rule, parent: matches.append(rule))
        return matches

    def get_exactly_one(self, criterion: Any, phase: Optional[Union[Phase, str]] = None) -> Rule:
        """Retrieve the single rule matching a criterion.

        The phase clause is ``phase`` when given, else the criterion's own
        phase, else the configured default (``normal``).

        Args:
            criterion: Criterion to match
            phase: Phase override

        Returns:
            The matching rule

        Raises:
            CountMismatchError: If zero or several rules match
        """
        matcher = self.matcher(criterion)
        matcher = matcher.with_phase(phase or matcher.phase or self.settings.default_phase)

        with self.logger.add_context(criterion=repr(matcher)):
            matches = self.filter_first(matcher)
            self.logger.debug("Single rule lookup", found=len(matches))

        assert_found_count(matches, 1)
        return matches[0]

    def insert_after(self, criterion: Any, insert: InsertSpec) -> Rule:
        """Insert a rule right after the single rule matching ``criterion``.

        Args:
            criterion: Criterion selecting exactly one rule
            insert: Rule to insert, or ``fn(matched_rule, parent_list)``
                returning it

        Returns:
            The inserted rule
        """
        return self._insert(InsertPosition.AFTER, criterion, insert)

    def insert_before(self, criterion: Any, insert: InsertSpec) -> Rule:
        """Insert a rule right before the single rule matching ``criterion``."""
        return self._insert(InsertPosition.BEFORE, criterion, insert)

    def _find_one_with_parent(self, criterion: Any) -> Tuple[Rule, Optional[List[Rule]]]:
        found: List[Tuple[Rule, Optional[List[Rule]]]] = []
        self.match_first(criterion, lambda rule, parent: found.append((rule, parent)))
        assert_found_count(found, 1)
        return found[0]

    def _insert(self, position: InsertPosition, criterion: Any, insert: InsertSpec) -> Rule:
        matcher = self.matcher(criterion)
        rule, parent = self._find_one_with_parent(matcher)

        if parent is None:
            raise RuleSetError("Cannot insert relative to the root rule")

        value = insert(rule, parent) if callable(insert) else insert
        if not isinstance(value, dict):
            raise RuleSetError(f"Rule to insert must be a dictionary, got {type(value).__name__}")

        index = next((i for i, sibling in enumerate(parent) if sibling is rule), None)
        if index is None:
            raise RuleSetError(
                "Matched rule is no longer in its parent list", ErrorCode.INTERNAL_ERROR
            )

        insert_index = index if position == InsertPosition.BEFORE else index + 1
        parent.insert(insert_index, value)

        self.logger.debug(
            "Inserted rule",
            position=position.value,
            index=insert_index,
            criterion=repr(matcher),
        )
        return value

    def __len__(self) -> int:
        """Return number of root rules."""
        return len(self.rules)
