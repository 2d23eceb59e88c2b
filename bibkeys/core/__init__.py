"""Core definitions shared by the key pattern modules."""

from .fields import EntryType, parse_entry_type

__all__ = ["EntryType", "parse_entry_type"]
