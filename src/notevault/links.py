"""Incremental maintenance of the reference/backreference graph.

Each note stores the ids it references and the ids that reference it.  The
two lists are kept mirror images of each other:

    B in A.references  <=>  A in B.backreferences

with two exceptions.  A note referencing itself keeps its own id in
``references`` but never in ``backreferences``.  A reference to an id with no
note behind it stays in ``references`` and produces no backreference; the
target, if created later, does not pick one up until the referencing note is
edited again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notevault.parser import parse_references

if TYPE_CHECKING:
    from notevault.store import NoteStore


def apply_content_update(store: "NoteStore", note_id: str, new_content: str) -> None:
    """Re-derive *note_id*'s references from *new_content* and patch backreferences.

    Only the targets that entered or left the reference set are touched.  A
    missing *note_id* is a no-op.
    """
    note = store.get_note(note_id)
    if note is None:
        return

    old_refs = note.references
    new_refs = parse_references(new_content)
    old_set, new_set = set(old_refs), set(new_refs)

    for target_id in old_refs:
        if target_id in new_set:
            continue
        target = store.get_note(target_id)
        if target is not None:
            target.backreferences = [i for i in target.backreferences if i != note_id]

    for target_id in new_refs:
        if target_id in old_set or target_id == note_id:
            continue
        target = store.get_note(target_id)
        if target is not None and note_id not in target.backreferences:
            target.backreferences.append(note_id)

    note.references = new_refs


def unlink_note(store: "NoteStore", note_id: str) -> None:
    """Remove every edge incident to *note_id* from the rest of the store.

    All notes are swept rather than only the ones listed in the victim's own
    backreferences: a note that referenced *note_id* before it existed holds
    a forward link with no matching backreference.  The record itself is left
    in place for the caller to drop.
    """
    if store.get_note(note_id) is None:
        return

    for other_id, other in store.notes.items():
        if other_id == note_id:
            continue
        if note_id in other.references:
            other.references = [i for i in other.references if i != note_id]
        if note_id in other.backreferences:
            other.backreferences = [i for i in other.backreferences if i != note_id]


def symmetry_violations(store: "NoteStore") -> list[tuple[str, str]]:
    """Return ``(source_id, target_id)`` pairs where the two lists disagree.

    A pair is reported when *source* references an existing *target* that does
    not list it back, or when *target* lists a backreference from *source*
    that *source* does not (or cannot) hold.  Self-references and dangling
    references are not violations.
    """
    result: list[tuple[str, str]] = []
    seen: set[tuple[str, str]] = set()
    for source_id, source in store.notes.items():
        for target_id in source.references:
            if target_id == source_id:
                continue
            target = store.get_note(target_id)
            if target is not None and source_id not in target.backreferences:
                result.append((source_id, target_id))
                seen.add((source_id, target_id))
    for target_id, target in store.notes.items():
        for source_id in target.backreferences:
            source = store.get_note(source_id)
            if source_id == target_id or source is None or target_id not in source.references:
                pair = (source_id, target_id)
                if pair not in seen:
                    seen.add(pair)
                    result.append(pair)
    return result
