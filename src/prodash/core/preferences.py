# src/prodash/core/preferences.py

from __future__ import annotations

import logging

from ..storage.local_store import KEY_CREDENTIAL, KEY_PREFERENCES, CorruptValueError, LocalStore
from .models import Preferences, Theme

logger = logging.getLogger(__name__)


class PreferencesStore:
    """Singleton user preferences document; save() overwrites it wholesale."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def load(self) -> Preferences:
        try:
            raw = self._store.read(KEY_PREFERENCES)
        except CorruptValueError:
            logger.warning("Stored preferences are corrupt; using defaults.")
            return Preferences()
        if not isinstance(raw, dict):
            return Preferences()
        return Preferences.from_doc(raw)

    def save(self, prefs: Preferences) -> None:
        self._store.write(KEY_PREFERENCES, prefs.to_doc())
        logger.info("Preferences saved theme=%s voice=%s", prefs.theme.value, prefs.voice_style.value)


def resolve_theme(theme: Theme, *, system_prefers_dark: bool = False) -> Theme:
    """Map 'system' onto the concrete theme the platform asks for."""
    if theme == Theme.SYSTEM:
        return Theme.DARK if system_prefers_dark else Theme.LIGHT
    return theme


class CredentialStore:
    """
    Completion API credential, kept client-side.

    Never validated before use: the first failing request is the only check.
    """

    def __init__(self, store: LocalStore, *, default: str | None = None) -> None:
        self._store = store
        self._default = (default or "").strip() or None

    def get(self) -> str | None:
        try:
            raw = self._store.read(KEY_CREDENTIAL)
        except CorruptValueError:
            logger.warning("Stored credential is corrupt; ignoring it.")
            raw = None
        if isinstance(raw, str) and raw.strip():
            return raw.strip()
        return self._default

    def set(self, credential: str) -> None:
        value = (credential or "").strip()
        if not value:
            self.clear()
            return
        self._store.write(KEY_CREDENTIAL, value)
        logger.info("Chat credential stored.")

    def clear(self) -> None:
        self._store.remove(KEY_CREDENTIAL)
        logger.info("Chat credential removed.")

    @staticmethod
    def mask(credential: str | None) -> str:
        if not credential:
            return "(not set)"
        if len(credential) <= 8:
            return "*" * len(credential)
        return f"{credential[:3]}...{credential[-4:]}"
