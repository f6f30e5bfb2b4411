"""Journal use-cases built on top of :class:`~journal.index.JournalIndex`.

- :func:`new_entry` creates ``<date>-<name>.md`` with a metadata block and
  opens it for editing.
- :func:`tag_counts` lists tags with the number of entries using them.
- :func:`entries_with_tag` lists the entries carrying one tag.
- :func:`entry_ids` lists every entry id.
- :func:`find_by_id` / :func:`edit_by_id` locate an entry by its id.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from journal import timestamps
from journal.config import JournalConfig
from journal.db import JournalDB
from journal.editor import open_in_editor
from journal.entry import Entry
from journal.errors import EntryExistsError
from journal.index import JournalIndex

LOGGER = logging.getLogger(__name__)


def _build_index(config: JournalConfig) -> JournalIndex:
    index = JournalIndex(config.journal_path)
    index.build()
    return index


def render_entry(tags: str, entry_id: str, pubdate: str, body: str) -> str:
    return f"tags: {tags}\nid: {entry_id}\npubdate: {pubdate}\n---\n\n{body}\n"


def new_entry(
    config: JournalConfig,
    name: str,
    tags: str | None = None,
    body: str = "",
    *,
    now: datetime | None = None,
    open_editor: bool = True,
) -> Path:
    """Create a new entry named *name* and open it in the configured editor.

    The entry id is *name* unless another entry already uses it, in which
    case the id is left empty.
    """
    now = now or timestamps.now()
    path = config.journal_path / f"{now:%Y-%m-%d}-{name}.md"
    if path.exists():
        raise EntryExistsError(f"file with path {path} already exists")

    index = _build_index(config)
    entry_id = "" if name in index.ids else name
    if not entry_id:
        LOGGER.info("Id %r is already taken; leaving the new entry without an id", name)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        render_entry(tags or "", entry_id, timestamps.to_str(now), body),
        encoding="utf-8",
    )
    LOGGER.info("Created %s", path)

    if open_editor:
        open_in_editor(path, config.editor)
    return path


def tag_counts(config: JournalConfig) -> list[tuple[str, int]]:
    """Return ``(tag, entry_count)`` pairs sorted by count, least used first."""
    with JournalDB(_build_index(config)) as db:
        return list(db.tag_counts().iter_rows())


def entries_with_tag(config: JournalConfig, tag: str) -> list[Path]:
    """Return the paths of entries tagged *tag*, in path order."""
    return [entry.path for entry in _build_index(config).entries_with_tag(tag)]


def entry_ids(config: JournalConfig) -> list[str]:
    return sorted(_build_index(config).ids)


def find_by_id(config: JournalConfig, entry_id: str) -> Entry | None:
    return _build_index(config).find_by_id(entry_id)


def edit_by_id(config: JournalConfig, entry_id: str) -> Path | None:
    """Open the entry whose id is *entry_id*; return its path, or ``None``."""
    entry = find_by_id(config, entry_id)
    if entry is None:
        return None
    open_in_editor(entry.path, config.editor)
    return entry.path
