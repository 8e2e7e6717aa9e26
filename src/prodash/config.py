# src/prodash/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the chat credential is supplied at runtime).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "PRODASH"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_path: Path

    # ---- Chat completion endpoint ----
    openai_api_key: str | None
    openai_base_url: str
    chat_model: str
    chat_temperature: float
    chat_max_tokens: int
    chat_context_messages: int
    chat_demo_mode: bool

    # ---- Transport timeouts ----
    llm_connect_timeout: float
    llm_read_timeout: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "prodash") or "prodash"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/prodash"))
        store_path = _env_path(_k("STORE_PATH"), data_dir / "local_store.sqlite3")

        # Default credential only; the one stored via /key takes precedence.
        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        chat_model = _env(_k("CHAT_MODEL"), "gpt-4o-mini").strip() or "gpt-4o-mini"

        chat_temperature = _env_float(_k("CHAT_TEMPERATURE"), 0.7)
        chat_max_tokens = _env_int(_k("CHAT_MAX_TOKENS"), 500)
        chat_context_messages = max(0, _env_int(_k("CHAT_CONTEXT_MESSAGES"), 10))
        chat_demo_mode = _env_bool(_k("CHAT_DEMO_MODE"), False)

        llm_connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_path=store_path,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            chat_model=chat_model,
            chat_temperature=chat_temperature,
            chat_max_tokens=chat_max_tokens,
            chat_context_messages=chat_context_messages,
            chat_demo_mode=chat_demo_mode,
            llm_connect_timeout=llm_connect_timeout,
            llm_read_timeout=llm_read_timeout,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
