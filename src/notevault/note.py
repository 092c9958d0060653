"""Core Note and Template dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif value:
        # Older snapshots end timestamps with "Z"
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    else:
        return utc_now()
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


@dataclass
class Note:
    """A single note and its derived link sets."""

    id: str
    title: str
    content: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    #: Ids this note points at via [[id]] markers, dangling ones included
    references: list[str] = field(default_factory=list)
    #: Ids of notes whose references include this note
    backreferences: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "references": list(self.references),
            "backreferences": list(self.backreferences),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Note":
        """Build a note from :meth:`to_dict` output.

        Also accepts the camelCase ``links``/``backlinks`` layout written by
        the earlier Node server so existing ``db.json`` files keep loading.
        """
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            content=data.get("content") or "",
            created_at=_parse_timestamp(data.get("created_at", data.get("createdAt"))),
            updated_at=_parse_timestamp(data.get("updated_at", data.get("updatedAt"))),
            references=list(dict.fromkeys(data.get("references", data.get("links")) or [])),
            backreferences=list(dict.fromkeys(data.get("backreferences", data.get("backlinks")) or [])),
        )


@dataclass
class Template:
    """Reusable body text that new notes can start from."""

    id: str
    title: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "content": self.content}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Template":
        return cls(id=data["id"], title=data.get("title", ""), content=data.get("content") or "")
