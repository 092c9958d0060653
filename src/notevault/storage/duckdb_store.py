"""DuckDB storage backend.

Keeps the snapshot in two tables of a DuckDB database file.  Link sets are
stored as ``VARCHAR[]`` list columns and timestamps as ISO-8601 text, so a
row maps one-to-one onto :meth:`Note.to_dict`.

``save`` replaces every row inside a single transaction; if anything fails
the transaction is rolled back and the previous snapshot stays visible.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import duckdb

from notevault.errors import PersistenceError
from notevault.store import NoteStore

logger = logging.getLogger(__name__)

_NOTE_COLUMNS = ["id", "title", "content", "created_at", "updated_at", "references", "backreferences"]


class DuckDBBackend:
    """Storage backend backed by a local DuckDB database."""

    def __init__(self, path: Path | str = ":memory:") -> None:
        self._db_path = str(path)
        try:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn: duckdb.DuckDBPyConnection = duckdb.connect(self._db_path)
            self._ensure_schema()
        except (OSError, duckdb.Error) as exc:
            raise PersistenceError(
                "Could not open the note database.",
                operation="connect",
                path=self._db_path,
                original_error=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Internal setup
    # ------------------------------------------------------------------

    def _ensure_schema(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS notes (
                position    INTEGER NOT NULL,
                id          VARCHAR NOT NULL,
                title       VARCHAR NOT NULL,
                content     TEXT    NOT NULL,
                created_at  VARCHAR NOT NULL,
                updated_at  VARCHAR NOT NULL,
                links       VARCHAR[],
                backlinks   VARCHAR[]
            );
        """)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS templates (
                position    INTEGER NOT NULL,
                id          VARCHAR NOT NULL,
                title       VARCHAR NOT NULL,
                content     TEXT    NOT NULL
            );
        """)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def load(self) -> NoteStore:
        try:
            note_rows = self.conn.execute(
                "SELECT id, title, content, created_at, updated_at, links, backlinks "
                "FROM notes ORDER BY position"
            ).fetchall()
            template_rows = self.conn.execute(
                "SELECT id, title, content FROM templates ORDER BY position"
            ).fetchall()
        except duckdb.Error as exc:
            logger.error("Failed to load snapshot from %s: %s", self._db_path, exc)
            raise PersistenceError(
                "Could not read the note snapshot.",
                operation="load",
                path=self._db_path,
                original_error=exc,
            ) from exc

        data: dict[str, Any] = {
            "notes": {row[0]: dict(zip(_NOTE_COLUMNS, row)) for row in note_rows},
            "templates": {
                row[0]: dict(zip(["id", "title", "content"], row)) for row in template_rows
            },
        }
        return NoteStore.from_dict(data)

    def save(self, store: NoteStore) -> None:
        note_rows = [
            (
                pos,
                note.id,
                note.title,
                note.content,
                note.created_at.isoformat(),
                note.updated_at.isoformat(),
                list(note.references),
                list(note.backreferences),
            )
            for pos, note in enumerate(store.notes.values())
        ]
        template_rows = [
            (pos, tpl.id, tpl.title, tpl.content)
            for pos, tpl in enumerate(store.templates.values())
        ]
        try:
            self.conn.execute("BEGIN TRANSACTION")
            self.conn.execute("DELETE FROM notes")
            self.conn.execute("DELETE FROM templates")
            if note_rows:
                self.conn.executemany("INSERT INTO notes VALUES (?,?,?,?,?,?,?,?)", note_rows)
            if template_rows:
                self.conn.executemany("INSERT INTO templates VALUES (?,?,?,?)", template_rows)
            self.conn.execute("COMMIT")
        except duckdb.Error as exc:
            self._rollback()
            logger.error("Failed to save snapshot to %s: %s", self._db_path, exc)
            raise PersistenceError(
                "Could not write the note snapshot.",
                operation="save",
                path=self._db_path,
                original_error=exc,
            ) from exc

    def _rollback(self) -> None:
        try:
            self.conn.execute("ROLLBACK")
        except duckdb.Error as exc:
            # No transaction was open (BEGIN itself failed)
            logger.debug("Rollback skipped: %s", exc)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "DuckDBBackend":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
