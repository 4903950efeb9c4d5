"""rulescope - locate, filter and edit entries of nested build rule trees."""

from rulescope.core.constants import RULESCOPE_VERSION, Phase
from rulescope.rules import (
    CountMismatchError,
    Criterion,
    RuleMatcher,
    RuleSet,
    RuleSetError,
    normalize_rules,
)

__version__ = RULESCOPE_VERSION

__all__ = [
    "CountMismatchError",
    "Criterion",
    "Phase",
    "RuleMatcher",
    "RuleSet",
    "RuleSetError",
    "normalize_rules",
    "__version__",
]
