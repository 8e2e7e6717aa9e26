# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from prodash.cli.bootstrap import build_llm_client, create_initial_state
from prodash.config import Settings
from prodash.llm.client import OpenAICompletionClient
from prodash.llm.offline import OfflineLLMClient


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PRODASH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PRODASH_CHAT_MODEL", "  ")
    monkeypatch.setenv("PRODASH_CHAT_MAX_TOKENS", "not-a-number")
    monkeypatch.setenv("PRODASH_CHAT_CONTEXT_MESSAGES", "-3")
    monkeypatch.setenv("PRODASH_CHAT_DEMO_MODE", "yes")
    monkeypatch.delenv("PRODASH_STORE_PATH", raising=False)
    monkeypatch.delenv("PRODASH_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    s = Settings.from_env()

    assert s.data_dir == tmp_path
    assert s.store_path == tmp_path / "local_store.sqlite3"
    assert s.chat_model == "gpt-4o-mini"
    assert s.chat_max_tokens == 500
    assert s.chat_context_messages == 0
    assert s.chat_demo_mode is True
    assert s.openai_api_key == "sk-env"


def test_build_llm_client_follows_demo_mode(settings) -> None:
    assert isinstance(build_llm_client(settings), OpenAICompletionClient)
    settings.chat_demo_mode = True
    assert isinstance(build_llm_client(settings), OfflineLLMClient)


def test_state_restores_session_across_restarts(settings, llm) -> None:
    first = create_initial_state(settings=settings, llm=llm)
    assert first.session is None
    first.session = first.sessions.login("ada@example.com")
    first.load_collections()
    first.tasks.add("Survives restart")

    second = create_initial_state(settings=settings, llm=llm)

    assert second.logged_in
    assert second.tasks.items[-1].title == "Survives restart"
    assert second.store.path == settings.store_path


def test_env_credential_is_the_default_key(settings, llm) -> None:
    settings.openai_api_key = "sk-env"
    state = create_initial_state(settings=settings, llm=llm)
    assert state.credentials.get() == "sk-env"
    state.credentials.set("sk-user")
    assert state.credentials.get() == "sk-user"
