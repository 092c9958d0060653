"""Unit tests for notevault.store.NoteStore."""

from datetime import date, datetime, timezone

import pytest

from notevault.errors import NotFoundError, ValidationError
from notevault.links import symmetry_violations
from notevault.store import NoteStore

# ---------------------------------------------------------------------------
# create_note
# ---------------------------------------------------------------------------


class TestCreateNote:
    def test_basic_fields(self, store: NoteStore):
        note = store.create_note("Alpha", "Body")
        assert note.id == "0001"
        assert note.title == "Alpha"
        assert note.content == "Body"
        assert note.references == []
        assert note.backreferences == []
        assert note.created_at == note.updated_at
        assert store.notes[note.id] is note

    def test_content_defaults_to_empty(self, store: NoteStore):
        assert store.create_note("Alpha").content == ""

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_title_required(self, store: NoteStore, title):
        with pytest.raises(ValidationError) as excinfo:
            store.create_note(title, "Body")
        assert excinfo.value.field == "title"
        assert store.notes == {}

    def test_initial_content_links(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"see [[{a.id}]]")
        assert b.references == [a.id]
        assert a.backreferences == [b.id]

    def test_self_reference_on_create(self, store: NoteStore):
        # The id factory is deterministic, so the next id is known up front
        note = store.create_note("Self", "[[0001]]")
        assert note.references == ["0001"]
        assert note.backreferences == []

    def test_from_template(self, store: NoteStore):
        a = store.create_note("A")
        tpl = store.create_template("Meeting", f"# Agenda\n\nParent: [[{a.id}]]")
        note = store.create_note("Standup", "ignored", template_id=tpl.id)
        assert note.content == tpl.content
        assert note.references == [a.id]
        assert a.backreferences == [note.id]

    def test_unknown_template(self, store: NoteStore):
        with pytest.raises(NotFoundError) as excinfo:
            store.create_note("Standup", template_id="ffff")
        assert excinfo.value.kind == "template"
        assert store.notes == {}


# ---------------------------------------------------------------------------
# update_note
# ---------------------------------------------------------------------------


class TestUpdateNote:
    def test_scenario_link_then_clear(self, store: NoteStore):
        a = store.create_note("A", "")
        b = store.create_note("B", f"[[{a.id}]]")
        assert a.backreferences == [b.id]
        assert b.references == [a.id]

        store.update_note(b.id, content="")
        assert a.backreferences == []
        assert b.references == []
        assert b.content == ""

    def test_title_only_keeps_links(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"[[{a.id}]]")
        store.update_note(b.id, title="Renamed")
        assert b.title == "Renamed"
        assert b.references == [a.id]
        assert a.backreferences == [b.id]

    def test_updated_at_refreshed(self, store: NoteStore):
        note = store.create_note("A")
        created = note.updated_at
        store.update_note(note.id, content="new")
        assert note.updated_at > created
        assert note.created_at == created

    def test_blank_title_rejected(self, store: NoteStore):
        note = store.create_note("A", "body")
        with pytest.raises(ValidationError):
            store.update_note(note.id, title=" ", content="changed")
        assert note.title == "A"
        assert note.content == "body"

    def test_unknown_note(self, store: NoteStore):
        with pytest.raises(NotFoundError) as excinfo:
            store.update_note("ffff", content="x")
        assert excinfo.value.kind == "note"


# ---------------------------------------------------------------------------
# delete_note
# ---------------------------------------------------------------------------


class TestDeleteNote:
    def test_cascade_clears_referencing_notes(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"[[{a.id}]]")
        store.delete_note(a.id)
        assert a.id not in store.notes
        assert b.references == []

    def test_cascade_clears_targets(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"[[{a.id}]]")
        store.delete_note(b.id)
        assert a.backreferences == []

    def test_cascade_clears_reference_to_later_note(self, store: NoteStore):
        a = store.create_note("A", "[[0002]]")
        b = store.create_note("B")
        assert b.id == "0002"
        assert b.backreferences == []
        store.delete_note(b.id)
        assert a.references == []

    def test_store_stays_symmetric(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"[[{a.id}]]")
        c = store.create_note("C", f"[[{a.id}]] [[{b.id}]]")
        store.update_note(a.id, content=f"[[{b.id}]] [[{c.id}]]")
        store.delete_note(b.id)
        assert symmetry_violations(store) == []
        assert a.references == [c.id]
        assert c.references == [a.id]

    def test_unknown_note(self, store: NoteStore):
        with pytest.raises(NotFoundError):
            store.delete_note("ffff")


# ---------------------------------------------------------------------------
# linked_notes / daily_note
# ---------------------------------------------------------------------------


class TestLinkedNotes:
    def test_neighbours_with_titles(self, store: NoteStore):
        a = store.create_note("A")
        b = store.create_note("B", f"[[{a.id}]] [[dead]] [[0002]]")
        assert store.linked_notes(b.id) == {
            "references": [{"id": a.id, "title": "A"}],
            "backreferences": [],
        }
        assert store.linked_notes(a.id) == {
            "references": [],
            "backreferences": [{"id": b.id, "title": "B"}],
        }

    def test_unknown_note(self, store: NoteStore):
        with pytest.raises(NotFoundError):
            store.linked_notes("ffff")


class TestDailyNote:
    def test_created_once(self, store: NoteStore):
        note, created = store.daily_note(date(2026, 3, 4))
        assert created is True
        assert note.title == "Daily Note: 2026-03-04"
        assert note.content == "# 2026-03-04\n\n"

        again, created = store.daily_note(date(2026, 3, 4))
        assert created is False
        assert again is note

    def test_defaults_to_clock_date(self, store: NoteStore):
        note, _ = store.daily_note()
        assert note.title == "Daily Note: 2026-01-01"


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestTemplates:
    def test_create_and_list(self, store: NoteStore):
        tpl = store.create_template("T", "body")
        assert store.list_templates() == [tpl]
        assert store.require_template(tpl.id) is tpl

    @pytest.mark.parametrize(
        "title, content, field",
        [(None, "body", "title"), ("T", None, "content"), ("T", "", "content")],
    )
    def test_required_fields(self, store: NoteStore, title, content, field):
        with pytest.raises(ValidationError) as excinfo:
            store.create_template(title, content)
        assert excinfo.value.field == field

    def test_partial_update(self, store: NoteStore):
        tpl = store.create_template("T", "body")
        store.update_template(tpl.id, content="new body")
        assert tpl.title == "T"
        assert tpl.content == "new body"

    def test_blank_update_keeps_fields(self, store: NoteStore):
        tpl = store.create_template("T", "body")
        store.update_template(tpl.id, title="   ", content="\n\t")
        assert tpl.title == "T"
        assert tpl.content == "body"

    def test_delete(self, store: NoteStore):
        tpl = store.create_template("T", "body")
        store.delete_template(tpl.id)
        assert store.get_template(tpl.id) is None
        with pytest.raises(NotFoundError):
            store.delete_template(tpl.id)


# ---------------------------------------------------------------------------
# Snapshot conversion
# ---------------------------------------------------------------------------


class TestSnapshot:
    def test_round_trip(self, store: NoteStore):
        a = store.create_note("A")
        store.create_note("B", f"[[{a.id}]]")
        store.create_template("T", "body")
        restored = NoteStore.from_dict(store.to_dict())
        assert restored.to_dict() == store.to_dict()
        assert list(restored.notes) == list(store.notes)

    def test_missing_templates_key(self):
        restored = NoteStore.from_dict({"notes": {}})
        assert restored.templates == {}

    def test_legacy_layout(self):
        data = {
            "notes": {
                "0a": {
                    "id": "0a",
                    "title": "Old",
                    "content": "[[0b]]",
                    "createdAt": "2024-05-01T10:00:00.000Z",
                    "updatedAt": "2024-05-02T10:00:00.000Z",
                    "links": ["0b"],
                    "backlinks": [],
                },
                "0b": {
                    "id": "0b",
                    "title": "Older",
                    "content": "",
                    "createdAt": "2024-05-01T09:00:00.000Z",
                    "updatedAt": "2024-05-01T09:00:00.000Z",
                    "links": [],
                    "backlinks": ["0a"],
                },
            }
        }
        restored = NoteStore.from_dict(data)
        old = restored.notes["0a"]
        assert old.references == ["0b"]
        assert restored.notes["0b"].backreferences == ["0a"]
        assert old.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
        assert symmetry_violations(restored) == []
