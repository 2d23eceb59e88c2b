"""Shared fixtures for key pattern tests."""

import pytest

from bibkeys.core.fields import EntryType
from bibkeys.patterns import PatternTable, database_patterns, global_patterns


@pytest.fixture
def recording_fallback():
    """Fallback callable that records the entry types it was asked for."""

    class RecordingFallback:
        def __init__(self):
            self.calls = []
            self.tokens = ("[parent]", "[", "parent", "]")

        def __call__(self, entry_type):
            self.calls.append(entry_type)
            return self.tokens

    return RecordingFallback()


@pytest.fixture
def table(recording_fallback):
    """Empty table backed by a recording fallback."""
    return PatternTable(recording_fallback, name="test")


@pytest.fixture
def layered_tables():
    """Global and database tables mirroring a typical library setup."""
    global_table = global_patterns(
        default_pattern="[auth][year]",
        patterns={EntryType.BOOK: "[editors][year]"},
    )
    database_table = database_patterns(
        global_table,
        patterns={EntryType.INPROCEEDINGS: "[auth][year][venue]"},
    )
    return global_table, database_table
