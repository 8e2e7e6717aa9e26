# tests/test_chat.py

from __future__ import annotations

import sqlite3

import pytest

from prodash.core.chat import FALLBACK_REPLY, ChatPhase, ChatService, build_context_window
from prodash.core.entity_collections import ChatHistory
from prodash.core.errors import CompletionError, MissingCredentialError
from prodash.core.models import ChatMessage, Sender, VoiceStyle
from prodash.llm.offline import OfflineLLMClient
from prodash.storage.local_store import KEY_CHAT, LocalStore

from .fakes import FakeLLMClient


def _service(store: LocalStore, llm, *, key: str | None = "sk-test") -> ChatService:
    history = ChatHistory(store)
    history.load()
    return ChatService(history, llm, credential=lambda: key, voice_style=lambda: VoiceStyle.FRIENDLY)


def test_successful_send_appends_user_and_reply(store: LocalStore) -> None:
    llm = FakeLLMClient(next_text="Here you go.")
    chat = _service(store, llm)

    outcome = chat.send("Plan my day")

    assert outcome is not None and outcome.ok
    assert outcome.notice is None
    assert [(m.sender, m.text) for m in chat.history.items[-2:]] == [
        (Sender.USER, "Plan my day"),
        (Sender.ASSISTANT, "Here you go."),
    ]
    assert chat.phase == ChatPhase.APPENDED_SUCCESS
    assert len(store.read(KEY_CHAT)) == 3

    messages, system_prompt, api_key = llm.calls[0]
    assert api_key == "sk-test"
    assert "friendly" in system_prompt.lower()
    assert messages[-1] == {"role": "user", "content": "Plan my day"}


def test_failed_send_appends_exactly_one_fallback(store: LocalStore) -> None:
    llm = FakeLLMClient(error=CompletionError("HTTP 500: upstream exploded"))
    chat = _service(store, llm)
    chat.send("first")  # fails too, just to build some history
    before = len(chat.history)

    outcome = chat.send("second")

    assert outcome is not None and not outcome.ok
    assert outcome.notice == "HTTP 500: upstream exploded"
    assert len(chat.history) == before + 2
    new = chat.history.items[before:]
    assert [m.sender for m in new] == [Sender.USER, Sender.ASSISTANT]
    assert new[-1].text == FALLBACK_REPLY
    assert all("exploded" not in m.text for m in chat.history)
    assert chat.phase == ChatPhase.APPENDED_FALLBACK


def test_unexpected_client_error_is_also_a_fallback(store: LocalStore) -> None:
    chat = _service(store, FakeLLMClient(error=ValueError("bad json")))
    outcome = chat.send("hello")
    assert outcome is not None and not outcome.ok
    assert outcome.reply.text == FALLBACK_REPLY
    assert outcome.notice


def test_missing_credential_blocks_before_any_mutation(store: LocalStore) -> None:
    llm = FakeLLMClient()
    chat = _service(store, llm, key=None)
    before = store.read(KEY_CHAT)

    assert chat.needs_credential()
    with pytest.raises(MissingCredentialError):
        chat.send("hello?")

    assert store.read(KEY_CHAT) == before
    assert llm.calls == []


def test_offline_client_needs_no_credential(store: LocalStore) -> None:
    chat = _service(store, OfflineLLMClient(), key=None)
    outcome = chat.send("hello there")
    assert outcome is not None and outcome.ok
    assert outcome.reply.text == "Hello! How can I assist you today?"


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_blank_input_is_ignored(store: LocalStore, text: str) -> None:
    llm = FakeLLMClient()
    chat = _service(store, llm)
    assert chat.send(text) is None
    assert len(chat.history) == 1
    assert llm.calls == []


def test_context_window_is_last_ten_prior_messages(store: LocalStore) -> None:
    llm = FakeLLMClient()
    chat = _service(store, llm)
    for i in range(14):
        chat.history.append(Sender.USER if i % 2 == 0 else Sender.ASSISTANT, f"m{i}")

    chat.send("latest")

    messages, _, _ = llm.calls[0]
    assert len(messages) == 11
    assert messages[0] == {"role": "user", "content": "m4"}
    assert messages[1] == {"role": "assistant", "content": "m5"}
    assert messages[-1] == {"role": "user", "content": "latest"}


def test_build_context_window_maps_roles() -> None:
    history = [
        ChatMessage(id="welcome", sender=Sender.ASSISTANT, text="hi", timestamp=1),
        ChatMessage(id="2", sender=Sender.USER, text="yo", timestamp=2),
    ]
    assert build_context_window(history, "next", limit=10) == [
        {"role": "assistant", "content": "hi"},
        {"role": "user", "content": "yo"},
        {"role": "user", "content": "next"},
    ]
    assert build_context_window(history, "next", limit=0) == [{"role": "user", "content": "next"}]


def test_clear_resets_to_welcome(store: LocalStore) -> None:
    chat = _service(store, FakeLLMClient())
    chat.send("a")
    chat.send("b")
    chat.clear()
    assert len(chat.history) == 1
    assert chat.phase == ChatPhase.COMPOSING


def test_store_failure_on_reply_does_not_leave_chat_busy(store: LocalStore, monkeypatch: pytest.MonkeyPatch) -> None:
    chat = _service(store, FakeLLMClient(next_text="fine"))
    real_append = chat.history.append

    def failing_append(sender: Sender, text: str) -> ChatMessage:
        if sender == Sender.ASSISTANT:
            raise sqlite3.OperationalError("database is locked")
        return real_append(sender, text)

    monkeypatch.setattr(chat.history, "append", failing_append)
    with pytest.raises(sqlite3.OperationalError):
        chat.send("first")
    assert not chat.busy
    assert chat.phase == ChatPhase.COMPOSING

    monkeypatch.setattr(chat.history, "append", real_append)
    outcome = chat.send("second")
    assert outcome is not None and outcome.ok
    assert chat.history.items[-1].text == "fine"


def test_store_failure_on_fallback_does_not_leave_chat_busy(store: LocalStore, monkeypatch: pytest.MonkeyPatch) -> None:
    llm = FakeLLMClient(error=CompletionError("HTTP 503"))
    chat = _service(store, llm)
    real_append = chat.history.append

    def failing_append(sender: Sender, text: str) -> ChatMessage:
        if sender == Sender.ASSISTANT:
            raise sqlite3.OperationalError("disk I/O error")
        return real_append(sender, text)

    monkeypatch.setattr(chat.history, "append", failing_append)
    with pytest.raises(sqlite3.OperationalError):
        chat.send("first")

    monkeypatch.setattr(chat.history, "append", real_append)
    llm.error = None
    assert chat.send("second").ok
