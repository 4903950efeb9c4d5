"""
rulescope Core: Input Validators.

This module checks only what traversal needs: that the rule tree branches
through lists, that no rule carries both a sequence and a oneOf set, and
that a normalized tree mirrors the rule tree it was produced from.
"""
import re
from typing import Any, Dict, List, Sequence

from rulescope.core.constants import ErrorCode, Phase, RuleKey


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_rule_tree(rules: Any, location: str = "rules") -> bool:
    """Validate the branching structure of a rule list.

    Args:
        rules: Root rule list (or any nested child list)
        location: Human readable position used in error messages

    Returns:
        True if valid

    Raises:
        ValidationError: If the structure cannot be traversed
    """
    if not isinstance(rules, list):
        raise ValidationError(f"{location} must be a list, got {type(rules).__name__}")

    for i, rule in enumerate(rules):
        validate_rule(rule, f"{location}[{i}]")

    return True


def validate_rule(rule: Any, location: str = "rule") -> bool:
    """Validate a single rule and its children.

    Args:
        rule: Rule dictionary
        location: Human readable position used in error messages

    Returns:
        True if valid

    Raises:
        ValidationError: If rule is invalid
    """
    if not isinstance(rule, dict):
        raise ValidationError(f"{location} must be a dictionary")

    has_sequence = rule.get(RuleKey.SEQUENCE) is not None
    has_one_of = rule.get(RuleKey.ONE_OF) is not None

    if has_sequence and has_one_of:
        raise ValidationError(
            f"{location} cannot have both '{RuleKey.SEQUENCE}' and '{RuleKey.ONE_OF}'"
        )

    # An empty tag reads as normal, same as an absent one
    if rule.get(RuleKey.PHASE):
        validate_phase(rule[RuleKey.PHASE])

    if has_sequence:
        validate_rule_tree(rule[RuleKey.SEQUENCE], f"{location}.{RuleKey.SEQUENCE}")
    if has_one_of:
        validate_rule_tree(rule[RuleKey.ONE_OF], f"{location}.{RuleKey.ONE_OF}")

    return True


def validate_phase(phase: Any) -> bool:
    """Validate a phase tag.

    Raises:
        ValidationError: If phase is not one of pre, normal, post
    """
    try:
        Phase.parse(phase)
    except ValueError:
        valid_phases = [p.value for p in Phase]
        raise ValidationError(f"Invalid phase: {phase}. Must be one of {valid_phases}")
    return True


def validate_shape(rules: Sequence[Dict[str, Any]], normalized: Sequence[Any],
                   location: str = "rules") -> bool:
    """Validate that a normalized tree mirrors the rule tree index by index.

    Args:
        rules: Rule list
        normalized: NormalizedRule list produced from ``rules``
        location: Human readable position used in error messages

    Returns:
        True if the shapes line up

    Raises:
        ValidationError: If any branch length differs
    """
    if normalized is None or len(normalized) != len(rules):
        found = "none" if normalized is None else len(normalized)
        raise ValidationError(
            f"Normalized tree does not mirror {location}: "
            f"expected {len(rules)} entries, found {found}"
        )

    for i, (rule, norm) in enumerate(zip(rules, normalized)):
        for key, attr in ((RuleKey.SEQUENCE, "sequence"), (RuleKey.ONE_OF, "one_of")):
            children = rule.get(key)
            if children is None:
                continue
            validate_shape(children, getattr(norm, attr, None), f"{location}[{i}].{key}")

    return True


def validate_extension_pattern(pattern: str) -> bool:
    """Check that the extension pattern compiles.

    Raises:
        ValidationError: If pattern is not a valid regex
    """
    try:
        re.compile(pattern)
    except (re.error, TypeError) as e:
        raise ValidationError(f"Invalid extension pattern {pattern!r}: {e}")
    return True


def validate_matching_config(matching: Dict[str, Any]) -> bool:
    """Validate the ``matching`` configuration section.

    Args:
        matching: Matching configuration dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If matching config is invalid
    """
    if not isinstance(matching, dict):
        raise ValidationError("Matching configuration must be a dictionary")

    valid_fields = {"default_phase", "fake_file_name", "extension_pattern", "processor_suffixes"}
    unknown_fields = set(matching.keys()) - valid_fields
    if unknown_fields:
        raise ValidationError(
            f"Unknown matching configuration fields: {', '.join(sorted(unknown_fields))}"
        )

    if "default_phase" in matching:
        validate_phase(matching["default_phase"])

    if "extension_pattern" in matching:
        validate_extension_pattern(matching["extension_pattern"])

    if "fake_file_name" in matching:
        name = matching["fake_file_name"]
        if not isinstance(name, str) or not name or "/" in name:
            raise ValidationError(f"fake_file_name must be a bare file name: {name!r}")

    if "processor_suffixes" in matching:
        suffixes: List[Any] = matching["processor_suffixes"]
        if not isinstance(suffixes, (list, tuple)) or not all(
            isinstance(s, str) and s for s in suffixes
        ):
            raise ValidationError("processor_suffixes must be a list of non-empty strings")

    return True
