# src/prodash/core/session.py

"""
Session + auth stub.

There is no real credential verification: logging in records a session marker
in the local store. The Session object is created on login/register and
destroyed on logout or account deletion; views receive it explicitly instead
of reading the marker ad hoc.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..storage.local_store import ALL_KEYS, KEY_SESSION, CorruptValueError, LocalStore
from .errors import AuthError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Session:
    email: str
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.email or "User"

    def to_doc(self) -> dict[str, Any]:
        return {"email": self.email, "name": self.name}


class SessionManager:
    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def restore(self) -> Session | None:
        """Return the persisted session, if any. A corrupt marker counts as logged out."""
        try:
            raw = self._store.read(KEY_SESSION)
        except CorruptValueError:
            logger.warning("Session marker is corrupt; treating as logged out.")
            return None
        if not isinstance(raw, dict):
            return None
        return Session(email=str(raw.get("email") or ""), name=str(raw.get("name") or ""))

    @staticmethod
    def _require_email(email: str) -> str:
        e = (email or "").strip()
        if not e:
            raise ValidationError("Email is required")
        return e

    def login(self, email: str, password: str = "") -> Session:
        session = Session(email=self._require_email(email))
        self._store.write(KEY_SESSION, session.to_doc())
        logger.info("Session started.")
        return session

    def register(self, email: str, password: str, confirm_password: str) -> Session:
        if password != confirm_password:
            raise AuthError("Passwords do not match")
        return self.login(email, password)

    def request_password_reset(self, email: str) -> str:
        self._require_email(email)
        return "Password reset email sent! Please check your email for password reset instructions."

    def update_name(self, session: Session, name: str) -> Session:
        session.name = (name or "").strip()
        self._store.write(KEY_SESSION, session.to_doc())
        return session

    def logout(self) -> None:
        self._store.remove(KEY_SESSION)
        logger.info("Session ended.")

    def delete_account(self) -> None:
        """Remove the session marker and every dataset that belongs to the user."""
        self._store.clear(ALL_KEYS)
        logger.info("Account deleted: removed %d keys.", len(ALL_KEYS))
