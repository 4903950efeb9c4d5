#!/usr/bin/env python3
r"""Pattern matching for resource paths with glob and regex support.

Used by the reference normalizer to turn string and regex resource
conditions into predicates:
- Glob pattern matching (*.js, **/*.css)
- Regex pattern matching with compiled patterns
- Path normalization for consistent matching
- Multiple pattern support with OR logic

Example:
    >>> matcher = PatternMatcher()
    >>> matcher.add_glob_pattern("**/*.css")
    >>> matcher.add_regex_pattern(re.compile(r"\.scss$"))
    >>> matcher.matches("/project/src/styles/main.css")
    True
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import List, Pattern, Union

GLOB_CHARS = ("*", "?", "[")


class PatternType(Enum):
    """Pattern matching type."""

    GLOB = "glob"  # Shell-style patterns (*.js, **/*.css)
    REGEX = "regex"  # Regular expressions


@dataclass
class PatternEntry:
    """A single compiled pattern."""

    pattern_type: PatternType
    compiled: Pattern


def is_glob(pattern: str) -> bool:
    """Return True if the string contains glob wildcards."""
    return any(ch in pattern for ch in GLOB_CHARS)


def normalize_path(path: Union[str, PurePath]) -> str:
    """Normalize separators and drop the leading slash."""
    return str(path).replace("\\", "/").lstrip("/")


def glob_to_regex(pattern: str) -> str:
    """Translate a glob pattern to an anchored regex.

    ``**`` spans any number of path segments (including zero), ``*`` and
    ``?`` never cross a ``/``.
    """
    doublestar = "\x00DOUBLESTAR\x00"
    star = "\x00STAR\x00"
    question = "\x00QUESTION\x00"

    regex = normalize_path(pattern)
    regex = regex.replace("**", doublestar).replace("*", star).replace("?", question)
    regex = re.escape(regex)

    # "**/" → optional path prefix, "/**" → optional path suffix
    regex = regex.replace(re.escape(doublestar) + re.escape("/"), "(?:.*/|)")
    regex = regex.replace(re.escape("/") + re.escape(doublestar), "(?:/.*|)")
    regex = regex.replace(re.escape(doublestar), ".*")
    regex = regex.replace(re.escape(star), "[^/]*")
    regex = regex.replace(re.escape(question), "[^/]")

    return "^" + regex + "$"


class PatternMatcher:
    """Pattern matcher supporting glob and regex patterns (OR logic)."""

    def __init__(self):
        self._patterns: List[PatternEntry] = []

    def add_glob_pattern(self, pattern: str) -> None:
        """Add glob pattern.

        Args:
            pattern: Glob pattern (e.g., "*.js", "**/*.css")
        """
        compiled = re.compile(glob_to_regex(pattern))
        self._patterns.append(PatternEntry(PatternType.GLOB, compiled))

    def add_regex_pattern(self, pattern: Pattern) -> None:
        """Add a compiled regex pattern.

        Args:
            pattern: Compiled regular expression, searched with its own flags
        """
        self._patterns.append(PatternEntry(PatternType.REGEX, pattern))

    def matches(self, path: Union[str, PurePath]) -> bool:
        """Check if path matches any pattern.

        Glob patterns see the normalized path, regex patterns the path as given.

        Args:
            path: Resource path to check

        Returns:
            True if path matches any pattern
        """
        return any(self._matches_entry(path, entry) for entry in self._patterns)

    def _matches_entry(self, path: Union[str, PurePath], entry: PatternEntry) -> bool:
        if entry.pattern_type == PatternType.GLOB:
            return bool(entry.compiled.match(normalize_path(path)))
        return bool(entry.compiled.search(str(path)))
