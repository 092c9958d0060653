"""Abstract storage backend protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from notevault.store import NoteStore


@runtime_checkable
class StorageBackend(Protocol):
    """Common interface shared by all storage backends.

    Backends move whole snapshots: ``load`` returns every note and template,
    ``save`` rewrites all of them.  Both raise
    :class:`~notevault.errors.PersistenceError` on failure.
    """

    def load(self) -> NoteStore:
        """Return the stored snapshot, or an empty store when none exists yet."""
        ...

    def save(self, store: NoteStore) -> None:
        """Persist the full contents of *store*."""
        ...
