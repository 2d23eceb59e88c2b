"""Citation key pattern management."""

from bibkeys.core import EntryType, parse_entry_type
from bibkeys.patterns import (
    DEFAULT_PATTERN,
    InvalidPatternError,
    PatternConfigurationError,
    PatternError,
    PatternTable,
    database_patterns,
    global_patterns,
    split,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EntryType",
    "parse_entry_type",
    "DEFAULT_PATTERN",
    "PatternTable",
    "split",
    "global_patterns",
    "database_patterns",
    "PatternError",
    "InvalidPatternError",
    "PatternConfigurationError",
]
