"""NoteService: serialised load -> mutate -> save cycle around a NoteStore.

Each call loads a fresh snapshot from the backend, applies one operation and,
for mutations, saves the whole snapshot exactly once.  A lock spans the full
cycle so two requests handled on different threads never diff against the
same stale snapshot.  If ``save`` fails the mutated snapshot is simply
dropped; the next call reloads what was last committed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import date
from typing import TypeVar

from notevault.links import symmetry_violations
from notevault.note import Note, Template
from notevault.storage.base import StorageBackend
from notevault.store import NoteStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class NoteService:
    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend
        self._lock = threading.Lock()
        self._warned_asymmetry = False

    # ------------------------------------------------------------------
    # Snapshot cycle
    # ------------------------------------------------------------------

    def _load(self) -> NoteStore:
        store = self.backend.load()
        if self._warned_asymmetry:
            return store
        violations = symmetry_violations(store)
        if violations:
            self._warned_asymmetry = True
            logger.warning(
                "Loaded snapshot has %d asymmetric link(s), e.g. %s -> %s",
                len(violations),
                *violations[0],
            )
        return store

    def read(self, operation: Callable[[NoteStore], T]) -> T:
        with self._lock:
            return operation(self._load())

    def mutate(self, operation: Callable[[NoteStore], T]) -> T:
        """Run *operation* against a fresh snapshot and persist the result.

        Domain errors raised by *operation* propagate before anything is
        saved.
        """
        with self._lock:
            store = self._load()
            result = operation(store)
            self.backend.save(store)
            return result

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def list_notes(self) -> list[Note]:
        return self.read(lambda store: store.list_notes())

    def get_note(self, note_id: str) -> Note:
        return self.read(lambda store: store.require_note(note_id))

    def linked_notes(self, note_id: str) -> dict[str, list[dict[str, str]]]:
        return self.read(lambda store: store.linked_notes(note_id))

    def create_note(
        self,
        title: str | None,
        content: str | None = None,
        template_id: str | None = None,
    ) -> Note:
        note = self.mutate(lambda store: store.create_note(title, content, template_id))
        logger.info("Created note %s (%d reference(s))", note.id, len(note.references))
        return note

    def update_note(
        self,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Note:
        note = self.mutate(lambda store: store.update_note(note_id, title, content))
        logger.info("Updated note %s", note_id)
        return note

    def delete_note(self, note_id: str) -> None:
        note = self.mutate(lambda store: store.delete_note(note_id))
        logger.info(
            "Deleted note %s, unlinked %d referencing note(s)",
            note_id,
            len(note.backreferences),
        )

    def daily_note(self, today: date | None = None) -> tuple[Note, bool]:
        with self._lock:
            store = self._load()
            note, created = store.daily_note(today)
            if created:
                self.backend.save(store)
                logger.info("Created daily note %s", note.id)
            return note, created

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def list_templates(self) -> list[Template]:
        return self.read(lambda store: store.list_templates())

    def get_template(self, template_id: str) -> Template:
        return self.read(lambda store: store.require_template(template_id))

    def create_template(self, title: str | None, content: str | None) -> Template:
        tpl = self.mutate(lambda store: store.create_template(title, content))
        logger.info("Created template %s", tpl.id)
        return tpl

    def update_template(
        self,
        template_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Template:
        return self.mutate(lambda store: store.update_template(template_id, title, content))

    def delete_template(self, template_id: str) -> None:
        self.mutate(lambda store: store.delete_template(template_id))
        logger.info("Deleted template %s", template_id)
