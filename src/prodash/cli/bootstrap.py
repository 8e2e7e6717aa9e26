# src/prodash/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store, collections, chat client),
- restores the session marker into an explicit Session object.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.chat import ChatService
from ..core.entity_collections import ChatHistory, NoteCollection, TaskCollection
from ..core.models import Preferences
from ..core.ports import LLMClient
from ..core.preferences import CredentialStore, PreferencesStore
from ..core.session import SessionManager
from ..core.state import AppState
from ..llm.client import OpenAICompletionClient
from ..llm.offline import OfflineLLMClient
from ..storage.local_store import LocalStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)


def build_llm_client(settings) -> LLMClient:
    if getattr(settings, "chat_demo_mode", False):
        logger.info("Chat demo mode: using the offline responder.")
        return OfflineLLMClient()
    return OpenAICompletionClient(settings)


def create_initial_state(*, settings=None, llm: LLMClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = LocalStore(settings.store_path)
    prefs_store = PreferencesStore(store)
    credentials = CredentialStore(store, default=getattr(settings, "openai_api_key", None))

    chat = ChatService(
        ChatHistory(store),
        llm or build_llm_client(settings),
        credential=credentials.get,
        voice_style=lambda: prefs_store.load().voice_style,
        context_messages=int(getattr(settings, "chat_context_messages", 10)),
    )

    sessions = SessionManager(store)
    state = AppState(
        settings=settings,
        store=store,
        sessions=sessions,
        preferences_store=prefs_store,
        credentials=credentials,
        tasks=TaskCollection(store),
        notes=NoteCollection(store),
        chat=chat,
        preferences=Preferences(),
        session=sessions.restore(),
    )

    if state.session is not None:
        state.load_collections()
        logger.info("Session restored.")
    return state
