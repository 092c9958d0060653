"""Single-file JSON storage backend.

The whole snapshot lives in one document::

    {
      "notes":     {"<id>": {...note...}, ...},
      "templates": {"<id>": {...template...}, ...}
    }

Writes go to a temporary file in the same directory which then replaces the
target, so a failed save leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from notevault.errors import PersistenceError
from notevault.store import NoteStore

logger = logging.getLogger(__name__)


class JsonFileBackend:
    """Storage backend that keeps the snapshot in a JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> NoteStore:
        if not self.path.exists():
            logger.info("No snapshot at %s, initialising an empty one", self.path)
            store = NoteStore()
            self.save(store)
            return store
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return NoteStore.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Failed to load snapshot from %s: %s", self.path, exc)
            raise PersistenceError(
                "Could not read the note snapshot.",
                operation="load",
                path=str(self.path),
                original_error=exc,
            ) from exc

    def save(self, store: NoteStore) -> None:
        text = json.dumps(store.to_dict(), ensure_ascii=False, indent=2) + "\n"
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = NamedTemporaryFile(
                "w", encoding="utf-8", dir=str(self.path.parent), delete=False
            )
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp.close()
            os.replace(tmp.name, self.path)
        except OSError as exc:
            logger.error("Failed to save snapshot to %s: %s", self.path, exc)
            raise PersistenceError(
                "Could not write the note snapshot.",
                operation="save",
                path=str(self.path),
                original_error=exc,
            ) from exc
        finally:
            if tmp is not None:
                tmp.close()
                if os.path.exists(tmp.name):
                    os.unlink(tmp.name)
