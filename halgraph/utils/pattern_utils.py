"""
Relation Pattern Utilities

Ant-style pattern matching for link relations. Used by the HAL configuration
to select render modes for relations such as ``search``, ``acme:*`` or
``https://api.acme.com/rels/**``.

Pattern syntax:
- ``?`` matches one character other than ``/``
- ``*`` matches zero or more characters other than ``/``
- ``**`` matches zero or more path segments
"""

import re
from functools import lru_cache
from typing import Pattern


def is_pattern(text: str) -> bool:
    """Check whether the given text contains any wildcard characters."""
    return "*" in text or "?" in text


@lru_cache(maxsize=256)
def compile_relation_pattern(pattern: str) -> Pattern:
    """
    Compile an Ant-style relation pattern into a regular expression.

    Args:
        pattern: Relation pattern

    Returns:
        Compiled regular expression anchored at both ends
    """
    parts = []
    i = 0
    length = len(pattern)

    while i < length:
        char = pattern[i]

        if pattern.startswith("/**", i) and (i + 3 == length or pattern[i + 3] == "/"):
            # "/**" matches the prefix itself or any deeper path
            parts.append("(?:/.*)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif char == "*":
            parts.append("[^/]*")
            i += 1
        elif char == "?":
            parts.append("[^/]")
            i += 1
        else:
            parts.append(re.escape(char))
            i += 1

    return re.compile("".join(parts) + r"\Z")


def matches_relation_pattern(pattern: str, relation: str) -> bool:
    """
    Check whether a relation matches an Ant-style pattern.

    Args:
        pattern: Relation pattern (a literal relation matches only itself)
        relation: Relation value to test

    Returns:
        True if the relation matches the pattern
    """
    if not is_pattern(pattern):
        return pattern == relation
    return compile_relation_pattern(pattern).match(relation) is not None
