"""jrni journal library."""

from journal.db import JournalDB
from journal.entry import Entry
from journal.index import JournalIndex
from journal.parser import is_entry_path, normalize_tags, parse_entry
from journal.walker import WalkResult, walk_journal

__all__ = [
    "Entry",
    "JournalIndex",
    "JournalDB",
    "parse_entry",
    "normalize_tags",
    "is_entry_path",
    "walk_journal",
    "WalkResult",
]
