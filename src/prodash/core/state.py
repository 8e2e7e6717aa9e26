# src/prodash/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..storage.local_store import LocalStore
from .chat import ChatService
from .entity_collections import NoteCollection, TaskCollection
from .models import Preferences
from .preferences import CredentialStore, PreferencesStore
from .session import Session, SessionManager


@dataclass
class AppState:
    """Everything a view needs, wired once at startup (see cli/bootstrap.py)."""

    # Settings object (prodash.config.Settings or a test double).
    settings: Any

    store: LocalStore
    sessions: SessionManager
    preferences_store: PreferencesStore
    credentials: CredentialStore

    tasks: TaskCollection
    notes: NoteCollection
    chat: ChatService

    preferences: Preferences
    session: Session | None = None

    @property
    def logged_in(self) -> bool:
        return self.session is not None

    def load_collections(self) -> None:
        """Activate the dashboard views: each collection reads (or seeds) its key once."""
        self.tasks.load()
        self.notes.load()
        self.chat.history.load()
        self.preferences = self.preferences_store.load()

    def unload_collections(self) -> None:
        self.tasks.unload()
        self.notes.unload()
        self.chat.history.unload()
        self.preferences = Preferences()
