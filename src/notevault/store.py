"""NoteStore: in-memory snapshot of all notes and templates."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

from notevault.errors import NotFoundError, ValidationError
from notevault.links import apply_content_update, unlink_note
from notevault.note import Note, Template, utc_now

DAILY_TITLE_PREFIX = "Daily Note: "


def new_id() -> str:
    return str(uuid.uuid4())


def _require_text(value: str | None, field: str, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required.", field=field)
    return value


class NoteStore:
    """Notes and templates keyed by id, plus the operations that mutate them.

    Every operation leaves the reference/backreference lists consistent, so
    the snapshot can be persisted as soon as the call returns.
    """

    def __init__(
        self,
        *,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.notes: dict[str, Note] = {}
        self.templates: dict[str, Template] = {}
        self._id_factory = id_factory
        self._clock = clock

    # ------------------------------------------------------------------
    # Snapshot conversion
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "notes": {note_id: note.to_dict() for note_id, note in self.notes.items()},
            "templates": {tid: tpl.to_dict() for tid, tpl in self.templates.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> "NoteStore":
        store = cls(**kwargs)
        for note_data in (data.get("notes") or {}).values():
            note = Note.from_dict(note_data)
            store.notes[note.id] = note
        for tpl_data in (data.get("templates") or {}).values():
            tpl = Template.from_dict(tpl_data)
            store.templates[tpl.id] = tpl
        return store

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_note(self, note_id: str) -> Note | None:
        return self.notes.get(note_id)

    def require_note(self, note_id: str) -> Note:
        note = self.notes.get(note_id)
        if note is None:
            raise NotFoundError("note", note_id)
        return note

    def list_notes(self) -> list[Note]:
        return list(self.notes.values())

    def linked_notes(self, note_id: str) -> dict[str, list[dict[str, str]]]:
        """Return ``{id, title}`` of the existing direct neighbours of *note_id*."""
        note = self.require_note(note_id)

        def _summaries(ids: list[str]) -> list[dict[str, str]]:
            return [
                {"id": i, "title": self.notes[i].title}
                for i in ids
                if i != note_id and i in self.notes
            ]

        return {
            "references": _summaries(note.references),
            "backreferences": _summaries(note.backreferences),
        }

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def create_note(
        self,
        title: str | None,
        content: str | None = None,
        template_id: str | None = None,
    ) -> Note:
        """Create a note, optionally seeding its body from a template.

        Template content takes precedence over *content*.
        """
        title = _require_text(title, "title", "Title")
        body = content or ""
        if template_id:
            body = self.require_template(template_id).content

        now = self._clock()
        note = Note(id=self._id_factory(), title=title, created_at=now, updated_at=now)
        self.notes[note.id] = note
        apply_content_update(self, note.id, body)
        note.content = body
        return note

    def update_note(
        self,
        note_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Note:
        """Change title and/or content; ``None`` leaves a field untouched."""
        note = self.require_note(note_id)
        if title is not None:
            note.title = _require_text(title, "title", "Title")
        if content is not None:
            apply_content_update(self, note_id, content)
            note.content = content
        note.updated_at = self._clock()
        return note

    def delete_note(self, note_id: str) -> Note:
        note = self.require_note(note_id)
        unlink_note(self, note_id)
        del self.notes[note_id]
        return note

    def daily_note(self, today: date | None = None) -> tuple[Note, bool]:
        """Return today's daily note and whether it had to be created."""
        day = (today or self._clock().date()).isoformat()
        title = f"{DAILY_TITLE_PREFIX}{day}"
        for note in self.notes.values():
            if note.title == title:
                return note, False
        return self.create_note(title, f"# {day}\n\n"), True

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def get_template(self, template_id: str) -> Template | None:
        return self.templates.get(template_id)

    def require_template(self, template_id: str) -> Template:
        tpl = self.templates.get(template_id)
        if tpl is None:
            raise NotFoundError("template", template_id)
        return tpl

    def list_templates(self) -> list[Template]:
        return list(self.templates.values())

    def create_template(self, title: str | None, content: str | None) -> Template:
        tpl = Template(
            id=self._id_factory(),
            title=_require_text(title, "title", "Template title"),
            content=_require_text(content, "content", "Template content"),
        )
        self.templates[tpl.id] = tpl
        return tpl

    def update_template(
        self,
        template_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Template:
        tpl = self.require_template(template_id)
        if title and title.strip():
            tpl.title = title
        if content and content.strip():
            tpl.content = content
        return tpl

    def delete_template(self, template_id: str) -> Template:
        tpl = self.require_template(template_id)
        del self.templates[template_id]
        return tpl
