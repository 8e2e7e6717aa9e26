# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from prodash.cli.bootstrap import create_initial_state
from prodash.core.state import AppState
from prodash.storage.local_store import LocalStore

from .fakes import FakeLLMClient


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="prodash",
        log_level="INFO",
        # Paths (tmp per test run)
        data_dir=tmp_path / "data",
        store_path=tmp_path / "data" / "local_store.sqlite3",
        # Chat endpoint
        openai_api_key=None,
        openai_base_url="https://api.example.test/v1",
        chat_model="test-model",
        chat_temperature=0.2,
        chat_max_tokens=128,
        chat_context_messages=10,
        chat_demo_mode=False,
        llm_connect_timeout=1.0,
        llm_read_timeout=2.0,
    )


@pytest.fixture()
def store(tmp_path: Path) -> LocalStore:
    return LocalStore(tmp_path / "store.sqlite3")


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient(next_text="Sure, here is a plan.")


@pytest.fixture()
def state(settings: SimpleNamespace, llm: FakeLLMClient) -> AppState:
    """
    AppState wired with a fake LLM and a real SQLite-backed LocalStore.

    Not logged in: tests that need a session call /login (or sessions.login) themselves.
    """
    return create_initial_state(settings=settings, llm=llm)


@pytest.fixture()
def logged_in(state: AppState) -> AppState:
    state.session = state.sessions.login("ada@example.com", "pw")
    state.load_collections()
    return state
