"""Key pattern tables with override, default and parent fallback.

A table maps entry types to tokenized key patterns. Resolution for an entry
type looks at three levels in strict order and never mixes them:

1. the override stored for that entry type (wins even when empty),
2. the table default, if it is non-empty,
3. the parent fallback: another table or a plain callable.

Tables are composed into chains (entry scope -> database -> global) by
passing the parent as ``fallback``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Mapping
from enum import Enum, auto
from typing import Any, Protocol

import msgspec

from .exceptions import PatternConfigurationError
from .tokenizer import TokenSequence, bracket_problems, split

logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "[auth][year]"
DEFAULT_TOKENS: TokenSequence = split(DEFAULT_PATTERN)
DEFAULT_MAX_DEPTH = 32

FallbackFn = Callable[[Hashable], TokenSequence]

# Tables currently resolving on this thread, outermost first
_resolving = threading.local()


class Fallback(Protocol):
    """Parent scope consulted when a table has neither override nor default."""

    def parent_fallback(self, entry_type: Hashable) -> TokenSequence:
        """Return the pattern tokens for an entry type."""
        ...


class ResolutionLevel(Enum):
    """Which level of a table supplied a resolved pattern."""

    OVERRIDE = auto()
    DEFAULT = auto()
    FALLBACK = auto()


class Resolution(msgspec.Struct, frozen=True, kw_only=True):
    """Outcome of resolving an entry type through a table chain."""

    tokens: TokenSequence
    level: ResolutionLevel
    table: str
    depth: int = 0

    @property
    def pattern(self) -> str:
        """Original pattern string of the resolved tokens."""
        return self.tokens[0] if self.tokens else ""


class PatternTable:
    """Entry type to key pattern table.

    The parent scope is injected as ``fallback``. It may be another
    ``PatternTable``, an object implementing ``Fallback``, or any callable
    taking an entry type and returning a token sequence. Without a fallback
    the table ends in ``DEFAULT_TOKENS``.

    Mutations and reads of the stored patterns are serialized by an
    internal lock. The fallback is always called outside the lock.
    """

    def __init__(
        self,
        fallback: PatternTable | Fallback | FallbackFn | None = None,
        *,
        name: str = "table",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        """Initialize an empty table.

        Args:
            fallback: Parent table, ``Fallback`` object or callable consulted last
            name: Label used in logs and error messages
            max_depth: Longest parent chain followed before giving up
        """
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")

        self.name = name
        self.max_depth = max_depth
        self._parent: PatternTable | None = None
        self._fallback: FallbackFn | None = None
        if isinstance(fallback, PatternTable):
            self._parent = fallback
        elif hasattr(fallback, "parent_fallback"):
            self._fallback = fallback.parent_fallback
        elif callable(fallback):
            self._fallback = fallback
        elif fallback is not None:
            raise TypeError(
                f"fallback must be a PatternTable, define parent_fallback() "
                f"or be callable, got {type(fallback).__name__}"
            )

        self._default: TokenSequence = ()
        self._data: dict[Hashable, TokenSequence] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_patterns(
        cls,
        patterns: Mapping[Hashable, str],
        default: str | None = None,
        fallback: PatternTable | Fallback | FallbackFn | None = None,
        **kwargs: Any,
    ) -> PatternTable:
        """Build a table from a mapping of entry type to pattern string."""
        table = cls(fallback, **kwargs)
        for entry_type, pattern in patterns.items():
            table.add_pattern(entry_type, pattern)
        if default is not None:
            table.set_default_pattern(default)
        return table

    @property
    def parent(self) -> PatternTable | None:
        """Parent table, if the fallback is a table."""
        return self._parent

    # Mutation

    def add_pattern(self, entry_type: Hashable, pattern: str) -> None:
        """Store the override for an entry type, replacing any previous one."""
        tokens = self._tokenize(pattern)
        with self._lock:
            self._data[entry_type] = tokens
        logger.debug("%s: override for %s set to %r", self.name, entry_type, pattern)

    def remove_pattern(self, entry_type: Hashable) -> None:
        """Drop the override for an entry type so the default applies again."""
        with self._lock:
            self._data.pop(entry_type, None)

    def set_default_pattern(self, pattern: str) -> None:
        """Store the table default, replacing any previous one."""
        tokens = self._tokenize(pattern)
        with self._lock:
            self._default = tokens
        logger.debug("%s: default set to %r", self.name, pattern)

    def clear_default_pattern(self) -> None:
        """Forget the default so resolution falls through to the parent."""
        with self._lock:
            self._default = ()

    def clear(self) -> None:
        """Remove all overrides and the default."""
        with self._lock:
            self._data.clear()
            self._default = ()

    # Queries

    def get_default_pattern(self) -> TokenSequence:
        """Return the stored default; empty until one is set."""
        with self._lock:
            return self._default

    def is_default_value(self, entry_type: Hashable) -> bool:
        """Check whether the entry type has no override in this table."""
        with self._lock:
            return entry_type not in self._data

    def all_overridden_types(self) -> set[Hashable]:
        """Return the entry types that carry an override."""
        with self._lock:
            return set(self._data)

    def all_patterns(self) -> dict[Hashable, TokenSequence]:
        """Return a copy of all overrides."""
        with self._lock:
            return dict(self._data)

    # Resolution

    def resolve(self, entry_type: Hashable) -> TokenSequence:
        """Return the token sequence governing keys for an entry type.

        Raises:
            PatternConfigurationError: If the parent chain loops or is
                longer than ``max_depth``
        """
        return self.explain(entry_type).tokens

    def explain(self, entry_type: Hashable) -> Resolution:
        """Resolve an entry type and report which table and level answered.

        Parent tables are walked directly. Once a table without parent table
        is reached, its ``parent_fallback`` supplies the answer. Tables in
        progress are tracked per thread, so a fallback that calls back into
        a table already resolving is reported as a cycle.
        """
        active: list[PatternTable] = getattr(_resolving, "tables", None) or []
        _resolving.tables = active
        entered = 0
        table: PatternTable = self

        try:
            while True:
                if any(t is table for t in active):
                    raise PatternConfigurationError(
                        [t.name for t in active] + [table.name], "cycle detected"
                    )
                if len(active) >= self.max_depth:
                    raise PatternConfigurationError(
                        [t.name for t in active], f"deeper than {self.max_depth} tables"
                    )
                active.append(table)
                entered += 1

                found = table._lookup(entry_type)
                if found is not None:
                    level, tokens = found
                    logger.debug(
                        "Resolved %s from %s of %s",
                        entry_type,
                        level.name.lower(),
                        table.name,
                    )
                    return Resolution(
                        tokens=tokens, level=level, table=table.name, depth=entered - 1
                    )

                if table._parent is None:
                    logger.debug("Resolved %s from fallback of %s", entry_type, table.name)
                    return Resolution(
                        tokens=table.parent_fallback(entry_type),
                        level=ResolutionLevel.FALLBACK,
                        table=table.name,
                        depth=entered - 1,
                    )
                table = table._parent
        finally:
            del active[len(active) - entered :]

    def parent_fallback(self, entry_type: Hashable) -> TokenSequence:
        """Ask the parent scope for the pattern of an entry type.

        ``explain`` calls this for the last table of a chain; for a table
        with a parent table it resolves through that parent.
        """
        if self._parent is not None:
            return self._parent.resolve(entry_type)
        return self._terminal(entry_type)

    def _lookup(self, entry_type: Hashable) -> tuple[ResolutionLevel, TokenSequence] | None:
        with self._lock:
            tokens = self._data.get(entry_type)
            if tokens is not None:
                return ResolutionLevel.OVERRIDE, tokens
            # An empty default pattern counts as no default at all
            if self._default and self._default[0]:
                return ResolutionLevel.DEFAULT, self._default
        return None

    def _terminal(self, entry_type: Hashable) -> TokenSequence:
        if self._fallback is None:
            return DEFAULT_TOKENS
        tokens = self._fallback(entry_type)
        if tokens is None:
            raise PatternConfigurationError(
                [self.name], f"fallback returned nothing for {entry_type}"
            )
        return tuple(tokens)

    def _tokenize(self, pattern: str) -> TokenSequence:
        tokens = split(pattern)
        for problem in bracket_problems(pattern):
            logger.warning("%s: pattern %r has %s", self.name, pattern, problem)
        return tokens

    # Value semantics

    def _state(self) -> tuple[TokenSequence, dict[Hashable, TokenSequence]]:
        with self._lock:
            return self._default, dict(self._data)

    def __eq__(self, other: object) -> bool:
        """Tables are equal when defaults and overrides are equal."""
        if not isinstance(other, PatternTable):
            return NotImplemented
        if other is self:
            return True
        return self._state() == other._state()

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, entry_type: object) -> bool:
        with self._lock:
            return entry_type in self._data

    def __repr__(self) -> str:
        default, data = self._state()
        return f"PatternTable(name={self.name!r}, default={default!r}, data={data!r})"
