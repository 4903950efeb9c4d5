"""rulescope Core - Shared constants and validation.

Import specific names from submodules:
    from rulescope.core.constants import Phase, RuleKey
    from rulescope.core.validators import ValidationError
"""

from rulescope.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
