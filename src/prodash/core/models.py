# src/prodash/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from .errors import ValidationError

WELCOME_MESSAGE_ID = "welcome"


class Sender(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def from_db(cls, raw: str | None) -> Sender:
        # Older documents used "bot" for the assistant side.
        if raw == "bot":
            return cls.ASSISTANT
        try:
            return cls(raw or "")
        except ValueError:
            return cls.USER


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class VoiceStyle(StrEnum):
    CALM = "calm"
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class NoteScope(StrEnum):
    ALL = "all"
    TITLE = "title"
    CONTENT = "content"
    TAGS = "tags"


def parse_choice(enum_cls: type[StrEnum], raw: str, *, field_name: str) -> Any:
    """Parse a user-supplied enum value; raise ValidationError listing allowed values."""
    value = (raw or "").strip().lower()
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from None


def utc_now_iso() -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a trailing Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_ms() -> int:
    return int(datetime.now(UTC).timestamp() * 1000)


def parse_iso(raw: str) -> datetime:
    """Parse an ISO 8601 string ('Z' accepted). Naive values are treated as local time."""
    s = (raw or "").strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def require_title(title: str | None, *, what: str) -> str:
    t = (title or "").strip()
    if not t:
        raise ValidationError(f"{what} title cannot be empty")
    return t


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str = ""
    due_date: str = field(default_factory=utc_now_iso)
    completed: bool = False
    recurring: bool = False

    def to_doc(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "dueDate": self.due_date,
            "completed": self.completed,
            "recurring": self.recurring,
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> Task:
        return cls(
            id=int(doc["id"]),
            title=str(doc["title"]),
            description=str(doc.get("description") or ""),
            due_date=str(doc.get("dueDate") or utc_now_iso()),
            completed=bool(doc.get("completed", False)),
            recurring=bool(doc.get("recurring", False)),
        )


@dataclass(slots=True)
class Note:
    id: int
    title: str
    content: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now_iso)

    def to_doc(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> Note:
        raw_tags = doc.get("tags") or []
        if not isinstance(raw_tags, list):
            raise ValueError("note tags must be a list")
        return cls(
            id=int(doc["id"]),
            title=str(doc["title"]),
            content=str(doc.get("content") or ""),
            tags=[str(t) for t in raw_tags],
            created_at=str(doc.get("createdAt") or utc_now_iso()),
        )


@dataclass(slots=True)
class ChatMessage:
    id: str
    sender: Sender
    text: str
    timestamp: int = field(default_factory=now_ms)

    @property
    def role(self) -> str:
        return "user" if self.sender == Sender.USER else "assistant"

    def to_doc(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> ChatMessage:
        return cls(
            id=str(doc["id"]),
            sender=Sender.from_db(doc.get("sender")),
            text=str(doc.get("text") or ""),
            timestamp=int(doc.get("timestamp") or 0),
        )


@dataclass(slots=True)
class Preferences:
    theme: Theme = Theme.SYSTEM
    notifications: bool = True
    sound_enabled: bool = True
    voice_style: VoiceStyle = VoiceStyle.CALM

    def to_doc(self) -> dict[str, Any]:
        return {
            "theme": self.theme.value,
            "notifications": self.notifications,
            "soundEnabled": self.sound_enabled,
            "voiceType": self.voice_style.value,
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> Preferences:
        """Lenient: missing or unknown values fall back to defaults; booleans default to True."""
        try:
            theme = Theme(doc.get("theme") or Theme.SYSTEM)
        except ValueError:
            theme = Theme.SYSTEM
        try:
            voice = VoiceStyle(doc.get("voiceType") or VoiceStyle.CALM)
        except ValueError:
            voice = VoiceStyle.CALM
        return cls(
            theme=theme,
            notifications=doc.get("notifications") is not False,
            sound_enabled=doc.get("soundEnabled") is not False,
            voice_style=voice,
        )
