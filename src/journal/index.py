"""JournalIndex: in-memory index of every entry in a journal directory."""

from __future__ import annotations

import logging
from pathlib import Path

from journal.entry import Entry
from journal.parser import parse_entry
from journal.walker import walk_journal

LOGGER = logging.getLogger(__name__)


class JournalIndex:
    """Walks a journal directory and builds tag and id lookups."""

    def __init__(self, journal_dir: Path, *, max_workers: int | None = None) -> None:
        self.journal_dir = Path(journal_dir)
        self.max_workers = max_workers
        self.entries: dict[Path, Entry] = {}
        #: Paths that could not be read, with the error raised for each
        self.failures: dict[Path, Exception] = {}
        self.tags: dict[str, list[Path]] = {}
        self.ids: dict[str, list[Path]] = {}

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def build(self) -> None:
        """(Re-)walk the journal and rebuild all lookups."""
        self.entries = {}
        self.failures = {}
        for result in walk_journal(self.journal_dir, parse_entry, max_workers=self.max_workers):
            if result.ok:
                self.entries[result.path] = result.value
            else:
                LOGGER.warning("Failed to read entry %s: %s", result.path, result.error)
                self.failures[result.path] = result.error
        self._build_tags()
        self._build_ids()
        LOGGER.debug(
            "Indexed %d entries (%d failed) under %s",
            len(self.entries),
            len(self.failures),
            self.journal_dir,
        )

    def _build_tags(self) -> None:
        self.tags = {}
        for path in sorted(self.entries):
            for tag in self.entries[path].tags:
                # Tags from a YAML list are passed through untouched and may not be strings
                key = str(tag)
                self.tags.setdefault(key, [])
                if path not in self.tags[key]:
                    self.tags[key].append(path)

    def _build_ids(self) -> None:
        self.ids = {}
        for path in sorted(self.entries):
            entry_id = self.entries[path].id
            if entry_id is not None:
                self.ids.setdefault(entry_id, []).append(path)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def entries_with_tag(self, tag: str) -> list[Entry]:
        return [self.entries[p] for p in self.tags.get(tag, []) if p in self.entries]

    def find_by_id(self, entry_id: str) -> Entry | None:
        """Return the first entry (by path order) whose id is *entry_id*."""
        paths = self.ids.get(entry_id, [])
        return self.entries[paths[0]] if paths else None

