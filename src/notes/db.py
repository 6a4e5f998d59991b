"""NotesDB — tabular view over the stored notes.

Loads whatever :meth:`NoteStore.read_all` yields into an in-memory DuckDB
table and returns :mod:`polars` DataFrames, which the marimo front-end renders
directly.

Usage::

    db = NotesDB(store)

    # Free-form SQL
    df = db.query("SELECT title, modified_at FROM notes ORDER BY modified_at DESC")

    # Pre-built view
    table = db.table_view(search="groceries", order_by="title")

The index can list the same title more than once; the table keeps one row per
title (the last one read).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import duckdb
import polars as pl

if TYPE_CHECKING:
    from notes.store import NoteStore

_COLUMNS = ("title", "file", "content", "created_at", "modified_at")


class NotesDB:
    """In-memory DuckDB database over the notes reachable through the index."""

    def __init__(self, store: "NoteStore") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(store)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, store: "NoteStore") -> None:
        """(Re-)populate the table from *store* (call after saves or deletes)."""
        self._store = store
        self._create_schema()
        self._load_notes()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE notes (
                title       VARCHAR PRIMARY KEY,
                file        VARCHAR,
                content     TEXT,
                created_at  TIMESTAMP,
                modified_at TIMESTAMP
            )
        """)

    def _load_notes(self) -> None:
        latest = {note.title: note for note in self._store.read_all()}
        rows = [
            (
                note.title,
                self._store.path_for(note.title).name,
                note.content,
                note.created_at,
                note.modified_at,
            )
            for note in latest.values()
        ]
        if rows:
            self.conn.executemany("INSERT INTO notes VALUES (?,?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str, params: list[Any] | None = None) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql, params or []).pl()

    def table_view(
        self,
        *,
        search: str | None = None,
        columns: list[str] | None = None,
        order_by: str = "title",
    ) -> pl.DataFrame:
        """Return notes as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        search:
            Case-insensitive substring filter on title or content.
        columns:
            Which columns to include.  Defaults to ``title, file, modified_at``.
        order_by:
            Column to sort by; must be one of the table's columns.
        """
        cols = list(columns) if columns else ["title", "file", "modified_at"]
        for col in [*cols, order_by]:
            if col not in _COLUMNS:
                raise ValueError(f"Unknown column: {col!r}")

        where = ""
        params: list[Any] = []
        if search:
            where = "WHERE title ILIKE ? OR content ILIKE ?"
            pattern = f"%{search}%"
            params = [pattern, pattern]

        sql = f"SELECT {', '.join(cols)} FROM notes {where} ORDER BY {order_by}"
        return self.query(sql, params)

    def schema_info(self) -> pl.DataFrame:
        """Return DuckDB DESCRIBE output for the notes table."""
        return self.conn.execute("DESCRIBE notes").pl()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "NotesDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
