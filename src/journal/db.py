"""JournalDB: SQL query view over indexed journal entries.

Uses DuckDB (in-memory) as a query engine over each entry's metadata, body
text, tags and file attributes. Returns :mod:`polars` DataFrames.

Usage::

    db = JournalDB(index)

    # Free-form SQL
    df = db.query("SELECT entry_id FROM entries WHERE 'travel' = ANY(tags)")

    # Pre-built views
    table = db.table_view(filter_tag="travel", order_by="mtime DESC")
    counts = db.tag_counts()

    # Schema introspection
    keys = db.metadata_keys()   # every metadata key used in the journal
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import duckdb
import polars as pl

if TYPE_CHECKING:
    from journal.index import JournalIndex


class JournalDB:
    """In-memory DuckDB database over journal entries."""

    def __init__(self, index: "JournalIndex") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(index)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, index: "JournalIndex") -> None:
        """(Re-)populate the database from *index* (call after index rebuild)."""
        self._index = index
        self._create_schema()
        self._load_entries()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE entries (
                path        VARCHAR PRIMARY KEY,
                entry_id    VARCHAR,
                body        TEXT,
                tags        VARCHAR[],
                metadata    JSON,
                size        BIGINT,
                mtime       DOUBLE
            )
        """)

    def _load_entries(self) -> None:
        rows = [
            (
                str(entry.path),
                entry.id,
                entry.body,
                [str(t) for t in entry.tags],
                # Explicit !!timestamp values are not JSON types
                json.dumps(entry.metadata, default=str),
                entry.file_info.st_size,
                entry.file_info.st_mtime,
            )
            for entry in self._index.entries.values()
        ]
        if rows:
            self.conn.executemany("INSERT OR REPLACE INTO entries VALUES (?,?,?,?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql).pl()

    def table_view(
        self,
        *,
        filter_tag: str | None = None,
        search: str | None = None,
        columns: list[str] | None = None,
        order_by: str = "path",
    ) -> pl.DataFrame:
        """Return entries as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        filter_tag:
            Only include entries that have this tag.
        search:
            Case-insensitive substring filter on the body.
        columns:
            Which columns to include. Defaults to ``path, entry_id, tags``.
        order_by:
            Column name to sort by.
        """
        cols = ", ".join(columns) if columns else "path, entry_id, tags"
        where_clauses: list[str] = []
        params: list[str] = []

        if filter_tag:
            where_clauses.append("list_contains(tags, ?)")
            params.append(filter_tag)
        if search:
            where_clauses.append("body ILIKE ?")
            params.append(f"%{search}%")

        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        safe_order = order_by.replace(";", "").replace("'", "")
        sql = f"SELECT {cols} FROM entries {where} ORDER BY {safe_order}"
        return self.conn.execute(sql, params).pl()

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → entry count table, least used first."""
        return self.conn.execute(
            """
            SELECT tag, COUNT(DISTINCT path) AS entry_count
            FROM (SELECT path, unnest(tags) AS tag FROM entries)
            GROUP BY tag
            ORDER BY entry_count, tag
            """
        ).pl()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def metadata_keys(self) -> list[str]:
        """Return every metadata key present across all entries."""
        rows = self.conn.execute(
            "SELECT DISTINCT unnest(json_keys(metadata)) AS k FROM entries ORDER BY k"
        ).fetchall()
        return [r[0] for r in rows]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "JournalDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
