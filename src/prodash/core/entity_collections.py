# src/prodash/core/entity_collections.py

"""
Entity collections persisted to the local store.

One collection = one ordered list of entities under one storage key.
The collection object is the only writer for its key; every mutation rewrites
the whole list (no partial persistence).

Lifecycle:
- load() once when the dashboard starts (absent key -> seed examples and persist)
- add/append, toggle, remove, reset_to_seed mutate memory first, then persist
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic, TypeVar

from ..storage.local_store import KEY_CHAT, KEY_NOTES, KEY_TASKS, CorruptValueError, LocalStore
from .errors import ValidationError
from .filters import TagDraft
from .ids import MonotonicIdGenerator
from .models import (
    WELCOME_MESSAGE_ID,
    ChatMessage,
    Note,
    Sender,
    Task,
    now_ms,
    parse_iso,
    require_title,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", Task, Note, ChatMessage)

WELCOME_TEXT = "Hello! I'm your AI assistant. How can I help you today?"


class EntityCollection(Generic[E]):
    """Ordered in-memory list of entities synchronized to one store key."""

    key: str = ""

    def __init__(self, store: LocalStore, *, ids: MonotonicIdGenerator | None = None) -> None:
        self._store = store
        self._ids = ids or MonotonicIdGenerator()
        self._items: list[E] = []
        self._loaded = False

    # ---- subclass hooks ----

    def _seed(self) -> list[E]:
        raise NotImplementedError

    def _to_doc(self, item: E) -> dict[str, Any]:
        return item.to_doc()

    def _from_doc(self, doc: dict[str, Any]) -> E:
        raise NotImplementedError

    def _id_of(self, item: E) -> Any:
        return item.id

    def _observe_id(self, item: E) -> None:
        self._ids.observe(int(self._id_of(item)))

    # ---- read side ----

    @property
    def items(self) -> list[E]:
        """Snapshot of the committed collection (mutating it does not affect the store)."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._items))

    def get(self, entity_id: Any) -> E | None:
        for item in self._items:
            if self._id_of(item) == entity_id:
                return item
        return None

    # ---- persistence ----

    def _decode(self, raw: Any) -> list[E]:
        if not isinstance(raw, list):
            raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
        out: list[E] = []
        for doc in raw:
            if not isinstance(doc, dict):
                raise ValueError(f"expected a JSON object, got {type(doc).__name__}")
            out.append(self._from_doc(doc))
        return out

    def load(self) -> list[E]:
        """
        Read the collection key.

        - absent            -> seed with example entities and persist them
        - present           -> use as-is
        - unparseable/shape -> log a warning, reseed and persist
        """
        try:
            raw = self._store.read(self.key)
            items = None if raw is None else self._decode(raw)
        except (CorruptValueError, ValueError, KeyError, TypeError):
            logger.warning("Stored %s collection is corrupt; resetting to seed data.", self.key, exc_info=True)
            items = None

        if items is None:
            self._items = self._seed()
            self._persist()
            logger.info("Seeded %s collection with %d example items.", self.key, len(self._items))
        else:
            self._items = items
            logger.debug("Loaded %s collection: %d items.", self.key, len(self._items))

        for item in self._items:
            self._observe_id(item)
        self._loaded = True
        return self.items

    def ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def unload(self) -> None:
        """Forget the in-memory copy (after account deletion); the next access reloads."""
        self._items = []
        self._loaded = False

    def _persist(self) -> None:
        self._store.write(self.key, [self._to_doc(i) for i in self._items])

    def _replace_all(self, items: Iterable[E]) -> None:
        self._items = list(items)
        self._persist()

    # ---- mutations ----

    def _append(self, item: E) -> E:
        self.ensure_loaded()
        self._items.append(item)
        self._persist()
        return item

    def remove(self, entity_id: Any) -> bool:
        """Filter the entity out by id. Returns False (and changes nothing) if it was not there."""
        self.ensure_loaded()
        remaining = [i for i in self._items if self._id_of(i) != entity_id]
        if len(remaining) == len(self._items):
            logger.debug("remove: %s id=%s not found", self.key, entity_id)
            return False
        self._replace_all(remaining)
        logger.debug("Removed from %s id=%s", self.key, entity_id)
        return True


class TaskCollection(EntityCollection[Task]):
    key = KEY_TASKS

    def _seed(self) -> list[Task]:
        return [
            Task(
                id=1,
                title="Complete project proposal",
                description="Finish the draft and send for review",
                due_date="2025-05-17T14:00",
            ),
            Task(
                id=2,
                title="Team meeting",
                description="Weekly standup with the development team",
                due_date="2025-05-18T09:00",
                recurring=True,
            ),
            Task(
                id=3,
                title="Review client feedback",
                description="Go through client comments and prepare responses",
                due_date="2025-05-17T16:30",
            ),
        ]

    def _from_doc(self, doc: dict[str, Any]) -> Task:
        return Task.from_doc(doc)

    def add(
        self,
        title: str,
        *,
        description: str = "",
        due_date: str | None = None,
        recurring: bool = False,
    ) -> Task:
        clean_title = require_title(title, what="Task")
        due = (due_date or "").strip()
        if due:
            try:
                parse_iso(due)
            except ValueError:
                raise ValidationError(f"Due date is not a valid ISO 8601 timestamp: {due!r}") from None
        else:
            due = utc_now_iso()

        self.ensure_loaded()
        task = Task(
            id=self._ids.next_id(),
            title=clean_title,
            description=(description or "").strip(),
            due_date=due,
            completed=False,
            recurring=bool(recurring),
        )
        self._append(task)
        logger.info("Task added id=%s recurring=%s", task.id, task.recurring)
        return task

    def toggle(self, task_id: int) -> Task | None:
        """Flip the completed flag. No-op (returns None) if the id is unknown."""
        self.ensure_loaded()
        task = self.get(task_id)
        if task is None:
            logger.debug("toggle: task id=%s not found", task_id)
            return None
        task.completed = not task.completed
        self._persist()
        return task


class NoteCollection(EntityCollection[Note]):
    key = KEY_NOTES

    def _seed(self) -> list[Note]:
        now = utc_now_iso()
        return [
            Note(
                id=1,
                title="Project Ideas",
                content=(
                    "1. Mobile app for task tracking\n"
                    "2. Blog platform with AI content suggestions\n"
                    "3. Smart home dashboard with IoT integration"
                ),
                tags=["ideas", "projects", "development"],
                created_at=now,
            ),
            Note(
                id=2,
                title="Meeting Notes",
                content=(
                    "- Discussed project timeline\n"
                    "- Assigned tasks to team members\n"
                    "- Next meeting scheduled for Friday"
                ),
                tags=["meeting", "work"],
                created_at=now,
            ),
        ]

    def _from_doc(self, doc: dict[str, Any]) -> Note:
        return Note.from_doc(doc)

    def add(self, title: str, *, content: str = "", tags: Sequence[str] = ()) -> Note:
        clean_title = require_title(title, what="Note")
        self.ensure_loaded()

        note = Note(
            id=self._ids.next_id(),
            title=clean_title,
            content=content or "",
            tags=TagDraft.from_iterable(tags).tags,
            created_at=utc_now_iso(),
        )
        self._append(note)
        logger.info("Note added id=%s tags=%d", note.id, len(note.tags))
        return note


class ChatHistory(EntityCollection[ChatMessage]):
    """Append-only chat transcript; the only bulk operation is reset_to_seed()."""

    key = KEY_CHAT

    @staticmethod
    def welcome_message() -> ChatMessage:
        return ChatMessage(id=WELCOME_MESSAGE_ID, sender=Sender.ASSISTANT, text=WELCOME_TEXT, timestamp=now_ms())

    def _seed(self) -> list[ChatMessage]:
        return [self.welcome_message()]

    def _from_doc(self, doc: dict[str, Any]) -> ChatMessage:
        return ChatMessage.from_doc(doc)

    def _observe_id(self, item: ChatMessage) -> None:
        if item.id.isdigit():
            self._ids.observe(int(item.id))

    def append(self, sender: Sender, text: str) -> ChatMessage:
        self.ensure_loaded()
        msg = ChatMessage(id=str(self._ids.next_id()), sender=sender, text=text, timestamp=now_ms())
        return self._append(msg)

    def reset_to_seed(self) -> ChatMessage:
        welcome = self.welcome_message()
        self._replace_all([welcome])
        self._loaded = True
        logger.info("Chat history cleared.")
        return welcome
