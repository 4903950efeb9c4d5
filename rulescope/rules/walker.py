#!/usr/bin/env python3
"""Lock-step traversal of a rule tree and its normalized shadow.

The walk is depth-first and pre-order. A visitor is called as
``visitor(rule, normalized_rule, parent)`` where ``parent`` is the list the
rule lives in (``None`` for the synthetic root). A truthy visitor result
prunes that node's subtree and marks it as matched.

``sequence`` children are all visited. ``oneOf`` children are visited until
the first one whose subtree matched, mirroring how a pipeline dispatches a
resource to at most one rule of a first-match set.
"""

from typing import Any, List, Optional, Sequence

from rulescope.core.constants import Rule, RuleKey, RuleList
from rulescope.infrastructure.logger import get_logger
from rulescope.rules.matcher import Visitor


class SyntheticRoot:
    """Normalized counterpart of the synthetic root rule."""

    resource = None

    def __init__(self, normalized_roots: Sequence[Any]):
        self.sequence = list(normalized_roots)
        self.one_of = None

    def __repr__(self) -> str:
        return f"SyntheticRoot({len(self.sequence)} rules)"


def _shadow_child(children: Optional[Sequence[Any]], index: int, key: str) -> Any:
    if children is not None and index < len(children):
        return children[index]
    # Tree was edited after normalization; the rule walks without a shadow
    get_logger().warning(
        "Rule has no normalized counterpart, rebuild the RuleSet to refresh it",
        branch=key,
        index=index,
    )
    return None


def walk(visitor: Visitor, rule: Rule, normalized_rule: Any,
         parent: Optional[List[Rule]] = None) -> bool:
    """Visit ``rule`` and its descendants.

    Args:
        visitor: Called for every node; truthy result prunes the subtree
        rule: Raw rule
        normalized_rule: Its normalized counterpart
        parent: List holding ``rule``

    Returns:
        True if this node or anything in its subtree matched
    """
    if visitor(rule, normalized_rule, parent):
        return True

    matched = False

    sequence = rule.get(RuleKey.SEQUENCE)
    if sequence is not None:
        shadow = getattr(normalized_rule, "sequence", None)
        for i, child in enumerate(sequence):
            if walk(visitor, child, _shadow_child(shadow, i, RuleKey.SEQUENCE), sequence):
                matched = True

    one_of = rule.get(RuleKey.ONE_OF)
    if one_of is not None:
        shadow = getattr(normalized_rule, "one_of", None)
        for i, child in enumerate(one_of):
            if walk(visitor, child, _shadow_child(shadow, i, RuleKey.ONE_OF), one_of):
                matched = True
                break

    return matched


def walk_root(visitor: Visitor, roots: RuleList, normalized_roots: Sequence[Any]) -> bool:
    """Walk a whole tree from a synthetic ``{"sequence": roots}`` root.

    The visitor is called once for the synthetic root itself, with
    ``parent=None``.
    """
    return walk(visitor, {RuleKey.SEQUENCE: roots}, SyntheticRoot(normalized_roots), None)


def walk_all(visitor: Visitor, roots: RuleList, normalized_roots: Sequence[Any]) -> None:
    """Walk every node, ignoring visitor results so no ``oneOf`` is cut short."""

    def exhaustive(rule: Rule, normalized_rule: Any, parent: Optional[List[Rule]]) -> bool:
        visitor(rule, normalized_rule, parent)
        return False

    walk_root(exhaustive, roots, normalized_roots)
