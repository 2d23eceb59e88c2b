"""Citation key pattern tables.

Patterns such as ``[auth][year]`` are tokenized and stored per entry type.
Tables resolve an entry type through override, default and parent fallback.
"""

from .exceptions import InvalidPatternError, PatternConfigurationError, PatternError
from .scopes import (
    constant_fallback,
    database_patterns,
    entry_patterns,
    global_patterns,
    global_patterns_from_settings,
)
from .table import (
    DEFAULT_PATTERN,
    DEFAULT_TOKENS,
    Fallback,
    PatternTable,
    Resolution,
    ResolutionLevel,
)
from .tokenizer import TokenSequence, bracket_problems, is_balanced, split

__all__ = [
    # Tokenizer
    "TokenSequence",
    "split",
    "bracket_problems",
    "is_balanced",
    # Tables
    "DEFAULT_PATTERN",
    "DEFAULT_TOKENS",
    "Fallback",
    "PatternTable",
    "Resolution",
    "ResolutionLevel",
    # Scopes
    "constant_fallback",
    "global_patterns",
    "global_patterns_from_settings",
    "database_patterns",
    "entry_patterns",
    # Errors
    "PatternError",
    "InvalidPatternError",
    "PatternConfigurationError",
]
