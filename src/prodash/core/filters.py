# src/prodash/core/filters.py

"""
Derived views over in-memory collections.

Everything here is pure: inputs are never mutated and nothing is persisted.
Views are recomputed each time they are rendered.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .models import NoteScope, TaskFilter

if TYPE_CHECKING:
    from .models import Note, Task


def filter_tasks(tasks: Iterable[Task], mode: TaskFilter | str = TaskFilter.ALL) -> list[Task]:
    """Partition by completion state, keeping the original relative order."""
    mode = TaskFilter(mode)
    if mode == TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if mode == TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    active: int
    completed: int

    @property
    def completion_ratio(self) -> float:
        return self.completed / self.total if self.total else 0.0


def task_counts(tasks: Iterable[Task]) -> TaskCounts:
    items = list(tasks)
    done = sum(1 for t in items if t.completed)
    return TaskCounts(total=len(items), active=len(items) - done, completed=done)


def note_matches(note: Note, query: str, scope: NoteScope | str = NoteScope.ALL) -> bool:
    q = (query or "").lower()
    if not q:
        return True

    scope = NoteScope(scope)
    in_title = q in note.title.lower()
    in_content = q in note.content.lower()
    in_tags = any(q in tag.lower() for tag in note.tags)

    if scope == NoteScope.TITLE:
        return in_title
    if scope == NoteScope.CONTENT:
        return in_content
    if scope == NoteScope.TAGS:
        return in_tags
    return in_title or in_content or in_tags


def search_notes(notes: Iterable[Note], query: str, scope: NoteScope | str = NoteScope.ALL) -> list[Note]:
    """Case-insensitive substring search over the scope-selected field(s). Empty query matches all."""
    return [n for n in notes if note_matches(n, query, scope)]


@dataclass(slots=True)
class TagDraft:
    """
    Tags being composed for a new note.

    add(): trims; ignores empty tags and exact (case-sensitive) duplicates.
    remove(): drops exact matches only.
    """

    _tags: list[str] = field(default_factory=list)

    @classmethod
    def from_iterable(cls, tags: Sequence[str]) -> TagDraft:
        draft = cls()
        for t in tags:
            draft.add(t)
        return draft

    @property
    def tags(self) -> list[str]:
        return list(self._tags)

    def add(self, tag: str) -> bool:
        t = (tag or "").strip()
        if not t or t in self._tags:
            return False
        self._tags.append(t)
        return True

    def remove(self, tag: str) -> None:
        self._tags = [t for t in self._tags if t != tag]

    def clear(self) -> None:
        self._tags = []
