"""Splitting of citation key patterns into tokens.

A key pattern looks like ``[auth][year]`` or ``[auth:lower]_[shorttitle]``.
The tokenizer does not decide what is a field and what is literal text; it
only cuts the string at the brackets and keeps the brackets as tokens, so a
key builder can walk the result and tell fields from separators itself.
"""

from __future__ import annotations

import re

from .exceptions import InvalidPatternError

TokenSequence = tuple[str, ...]

_DELIMITERS = re.compile(r"(\[|\])")


def split(pattern: str) -> TokenSequence:
    """Split a key pattern into its tokens.

    The first element is always the pattern itself. Each ``[`` and ``]``
    becomes a token of its own and every non-empty run between them is one
    token. Bracket balance is not checked.

    Args:
        pattern: Key pattern such as ``[auth][year]``

    Returns:
        Token sequence, e.g. ``("[auth]", "[", "auth", "]")``

    Raises:
        InvalidPatternError: If pattern is None or not a string
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern)

    return (pattern, *(part for part in _DELIMITERS.split(pattern) if part))


def bracket_problems(pattern: str) -> list[str]:
    """Describe bracket mistakes in a pattern.

    Returns an empty list for a well-formed pattern.
    """
    problems = []
    open_at: int | None = None

    for position, char in enumerate(pattern):
        if char == "[":
            if open_at is not None:
                problems.append(f"nested '[' at position {position}")
            open_at = position
        elif char == "]":
            if open_at is None:
                problems.append(f"unexpected ']' at position {position}")
            open_at = None

    if open_at is not None:
        problems.append(f"unclosed '[' at position {open_at}")

    return problems


def is_balanced(pattern: str) -> bool:
    """Check whether every ``[`` in the pattern has a matching ``]``."""
    return not bracket_problems(pattern)
