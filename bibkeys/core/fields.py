"""Entry type definitions used as keys of pattern tables."""

from collections.abc import Hashable
from enum import Enum, unique


@unique
class EntryType(str, Enum):
    """BibTeX and BibLaTeX entry types.

    Members compare equal to their string value, so ``EntryType.ARTICLE``
    and ``"article"`` address the same pattern table slot.
    """

    ARTICLE = "article"
    BOOK = "book"
    BOOKLET = "booklet"
    INBOOK = "inbook"
    INCOLLECTION = "incollection"
    INPROCEEDINGS = "inproceedings"
    CONFERENCE = "conference"
    MANUAL = "manual"
    MASTERSTHESIS = "mastersthesis"
    MISC = "misc"
    PHDTHESIS = "phdthesis"
    PROCEEDINGS = "proceedings"
    TECHREPORT = "techreport"
    UNPUBLISHED = "unpublished"

    # BibLaTeX
    ONLINE = "online"
    ELECTRONIC = "electronic"
    PATENT = "patent"
    SOFTWARE = "software"
    DATASET = "dataset"
    THESIS = "thesis"
    REPORT = "report"
    COLLECTION = "collection"

    def __str__(self) -> str:
        return self.value


def parse_entry_type(name: str) -> Hashable:
    """Map an entry type name to its ``EntryType``.

    Names are matched case-insensitively. Unknown names are returned as
    lower-cased strings so custom types can still carry patterns.
    """
    normalized = name.strip().lower()
    try:
        return EntryType(normalized)
    except ValueError:
        return normalized
