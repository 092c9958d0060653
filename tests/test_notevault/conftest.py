"""Shared fixtures for the notevault unit tests."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from notevault.errors import PersistenceError
from notevault.store import NoteStore


class MemoryBackend:
    """Storage backend that keeps the snapshot as a plain dict.

    ``load`` rebuilds a fresh :class:`NoteStore` each time, so nothing leaks
    between calls the way it would with a shared object.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = data or {"notes": {}, "templates": {}}
        self.saves = 0
        self.fail_saves = False

    def load(self) -> NoteStore:
        return NoteStore.from_dict(self.data)

    def save(self, store: NoteStore) -> None:
        if self.fail_saves:
            raise PersistenceError("disk full", operation="save")
        self.data = store.to_dict()
        self.saves += 1


@pytest.fixture()
def store() -> NoteStore:
    """Store with short, deterministic hex ids and a clock that ticks a second per call."""
    counter = itertools.count(1)
    ticks = itertools.count()
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return NoteStore(
        id_factory=lambda: f"{next(counter):04x}",
        clock=lambda: start + timedelta(seconds=next(ticks)),
    )


@pytest.fixture()
def memory_backend() -> MemoryBackend:
    return MemoryBackend()
