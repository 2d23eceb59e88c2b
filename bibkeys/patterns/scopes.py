"""Ready-made table layers: global, database and single entry.

Layers are chained by composition. The global table ends in a constant
fallback, a database table falls back to the global one, and an entry
table falls back to its database.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import TYPE_CHECKING

from .table import DEFAULT_MAX_DEPTH, DEFAULT_PATTERN, FallbackFn, PatternTable
from .tokenizer import split

if TYPE_CHECKING:
    from bibkeys.cli.config import KeyPatternSettings


def constant_fallback(pattern: str = DEFAULT_PATTERN) -> FallbackFn:
    """Return a fallback that yields the same pattern for every entry type."""
    tokens = split(pattern)

    def fallback(entry_type: Hashable) -> tuple[str, ...]:
        return tokens

    return fallback


def global_patterns(
    default_pattern: str = DEFAULT_PATTERN,
    patterns: Mapping[Hashable, str] | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> PatternTable:
    """Create the application-wide table.

    Args:
        default_pattern: Pattern used for types without override
        patterns: Optional per-type overrides
        max_depth: Longest parent chain followed from this table

    Returns:
        Table ending in the built-in default pattern
    """
    return PatternTable.from_patterns(
        patterns or {},
        default=default_pattern,
        fallback=constant_fallback(DEFAULT_PATTERN),
        name="global",
        max_depth=max_depth,
    )


def global_patterns_from_settings(settings: KeyPatternSettings) -> PatternTable:
    """Create the global table from loaded settings."""
    return global_patterns(
        default_pattern=settings.default_pattern,
        patterns=settings.entry_patterns(),
        max_depth=settings.max_depth,
    )


def database_patterns(
    parent: PatternTable,
    patterns: Mapping[Hashable, str] | None = None,
    default: str | None = None,
) -> PatternTable:
    """Create a per-database table that falls back to ``parent``."""
    return PatternTable.from_patterns(
        patterns or {},
        default=default,
        fallback=parent,
        name="database",
        max_depth=parent.max_depth,
    )


def entry_patterns(parent: PatternTable, pattern: str | None = None) -> PatternTable:
    """Create a single-entry table that falls back to ``parent``.

    A given ``pattern`` becomes the table default, so it applies to the entry
    whatever its type.
    """
    return PatternTable.from_patterns(
        {},
        default=pattern,
        fallback=parent,
        name="entry",
        max_depth=parent.max_depth,
    )
