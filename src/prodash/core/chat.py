# src/prodash/core/chat.py

"""
Chat orchestration.

Per send:  composing -> sending -> appended-success | appended-fallback

Key invariants:
- blank input never reaches the history,
- a send without a credential is blocked before anything is appended,
- the user turn is persisted before the request; exactly one assistant entry
  (reply or fallback apology) follows it,
- raw transport/API errors never enter the transcript; they surface as a notice.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum

from .entity_collections import ChatHistory
from .errors import ChatBusyError, CompletionError, MissingCredentialError
from .models import ChatMessage, Sender, VoiceStyle
from .persona import get_system_prompt
from .ports import LLMClient, PromptMessage

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_MESSAGES = 10

FALLBACK_REPLY = "I'm sorry, I couldn't get a response right now. Please try again in a moment."


class ChatPhase(StrEnum):
    COMPOSING = "composing"
    SENDING = "sending"
    APPENDED_SUCCESS = "appended_success"
    APPENDED_FALLBACK = "appended_fallback"


@dataclass(frozen=True, slots=True)
class ChatOutcome:
    user_message: ChatMessage
    reply: ChatMessage
    ok: bool
    # Transient notice for the user when the request failed (never stored).
    notice: str | None = None


def build_context_window(
    history: Sequence[ChatMessage],
    user_text: str,
    *,
    limit: int = DEFAULT_CONTEXT_MESSAGES,
) -> list[PromptMessage]:
    """Last `limit` prior messages mapped to user/assistant roles, then the new user turn."""
    prior = list(history)[-limit:] if limit > 0 else []
    window: list[PromptMessage] = [{"role": m.role, "content": m.text} for m in prior]
    window.append({"role": "user", "content": user_text})
    return window


class ChatService:
    def __init__(
        self,
        history: ChatHistory,
        llm: LLMClient,
        *,
        credential: Callable[[], str | None],
        voice_style: Callable[[], VoiceStyle] = lambda: VoiceStyle.CALM,
        context_messages: int = DEFAULT_CONTEXT_MESSAGES,
    ) -> None:
        self.history = history
        self.llm = llm
        self._credential = credential
        self._voice_style = voice_style
        self._context_messages = context_messages
        self.phase = ChatPhase.COMPOSING

    @property
    def busy(self) -> bool:
        return self.phase == ChatPhase.SENDING

    def needs_credential(self) -> bool:
        return bool(getattr(self.llm, "requires_credential", True)) and not self._credential()

    def send(self, text: str) -> ChatOutcome | None:
        """
        Send one user turn. Returns None for blank input (nothing happens).

        Raises MissingCredentialError before any mutation if the client needs a key
        and none was supplied; ChatBusyError if a request is already in flight.
        """
        if not (text or "").strip():
            return None
        if self.busy:
            raise ChatBusyError("Please wait for the current reply.")
        if self.needs_credential():
            raise MissingCredentialError("Add your API key with /key <your key> before chatting.")

        api_key = self._credential()
        prior = self.history.items
        window = build_context_window(prior, text, limit=self._context_messages)
        system_prompt = get_system_prompt(self._voice_style())

        user_msg = self.history.append(Sender.USER, text)
        self.phase = ChatPhase.SENDING
        try:
            try:
                reply_text = self.llm.complete(window, system_prompt, api_key=api_key)
            except CompletionError as e:
                reply = self.history.append(Sender.ASSISTANT, FALLBACK_REPLY)
                self.phase = ChatPhase.APPENDED_FALLBACK
                logger.info("Chat: completion failed, fallback appended (%s)", e.__class__.__name__)
                return ChatOutcome(user_message=user_msg, reply=reply, ok=False, notice=str(e))
            except Exception:
                # Any other client failure is handled the same way for the transcript.
                logger.exception("Chat: completion client crashed.")
                reply = self.history.append(Sender.ASSISTANT, FALLBACK_REPLY)
                self.phase = ChatPhase.APPENDED_FALLBACK
                return ChatOutcome(
                    user_message=user_msg,
                    reply=reply,
                    ok=False,
                    notice="Failed to get a response from the assistant.",
                )

            reply = self.history.append(Sender.ASSISTANT, reply_text)
            self.phase = ChatPhase.APPENDED_SUCCESS
            return ChatOutcome(user_message=user_msg, reply=reply, ok=True)
        finally:
            # Reply append failed (store error): this send is over either way.
            if self.phase == ChatPhase.SENDING:
                self.phase = ChatPhase.COMPOSING

    def clear(self) -> ChatMessage:
        self.phase = ChatPhase.COMPOSING
        return self.history.reset_to_seed()
