# src/prodash/llm/client.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..core.errors import CompletionError
from ..core.ports import PromptMessage

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"AuthenticationError", "PermissionDeniedError", "UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"RateLimitError", "TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError is a subclass of APIConnectionError.
    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError)):
        return True
    return exc.__class__.__name__ in {"APIConnectionError", "APITimeoutError", "ConnectTimeout", "ReadTimeout"}


def _is_not_found_error(exc: Exception) -> bool:
    if isinstance(exc, openai.NotFoundError):
        return True
    return exc.__class__.__name__ == "NotFoundError"


def friendly_completion_error(err: BaseException) -> str:
    """One-line, user-facing reason for a failed completion request."""
    cause = err.__cause__ if isinstance(err, CompletionError) and err.__cause__ is not None else err
    if isinstance(cause, Exception):
        if _is_auth_error(cause):
            return "The API key was rejected. Update it with /key <your key>."
        if _is_rate_limit_error(cause):
            return "The assistant is rate-limited. Try again later."
        if _is_not_found_error(cause):
            return "The configured chat model is not available (check PRODASH_CHAT_MODEL)."
        if _is_connection_error(cause):
            return "Network error or timeout while contacting the assistant."
    msg = str(err).strip()
    return msg or "The assistant returned an error."


def _extract_content(response: Any) -> str:
    """Top choice's message text, or raise CompletionError if the body is unusable."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise CompletionError("Malformed completion response (no choices).") from e
    if not isinstance(content, str) or not content.strip():
        raise CompletionError("Completion response contained no text.")
    return content.strip()


class OpenAICompletionClient:
    """
    One request per user turn against an OpenAI-compatible /chat/completions endpoint.

    - The credential comes from the caller on every call (it lives in the local store).
    - SDK retries are disabled: a failure is terminal for that send.
    - One SDK client is cached per credential.
    """

    requires_credential = True

    def __init__(self, settings: Any, *, client_factory: ClientFactory | None = None) -> None:
        self._settings = settings
        self._client_factory: ClientFactory = client_factory or self._make_sdk_client
        self._clients: dict[str, Any] = {}

    def _make_sdk_client(self, api_key: str) -> OpenAI:
        base_url = str(getattr(self._settings, "openai_base_url", "") or "").strip()
        if not base_url:
            raise CompletionError("Chat endpoint URL is not set. Set PRODASH_OPENAI_BASE_URL in your .env.")

        connect_s = float(getattr(self._settings, "llm_connect_timeout", 5.0))
        read_s = float(getattr(self._settings, "llm_read_timeout", 60.0))
        timeout = httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)

        return OpenAI(base_url=base_url, api_key=api_key, timeout=timeout, max_retries=0)

    def _get_client(self, api_key: str) -> Any:
        client = self._clients.get(api_key)
        if client is None:
            client = self._client_factory(api_key)
            self._clients = {api_key: client}
        return client

    def build_request(self, messages: list[PromptMessage], system_prompt: str) -> dict[str, Any]:
        return {
            "model": str(getattr(self._settings, "chat_model", "gpt-4o-mini")),
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "temperature": float(getattr(self._settings, "chat_temperature", 0.7)),
            "max_tokens": int(getattr(self._settings, "chat_max_tokens", 500)),
        }

    def complete(
        self,
        messages: list[PromptMessage],
        system_prompt: str,
        *,
        api_key: str | None,
    ) -> str:
        if not api_key or not api_key.strip():
            raise CompletionError("Chat API key is not set. Use /key <your key>.")

        request = self.build_request(messages, system_prompt)
        client = self._get_client(api_key.strip())

        logger.info("LLM: request model=%s turns=%d", request["model"], len(messages))
        t0 = time.monotonic()
        try:
            response = client.chat.completions.create(**request)
        except (openai.OpenAIError, httpx.HTTPError) as e:
            logger.info("LLM: request failed (%s) after %.2fs", e.__class__.__name__, time.monotonic() - t0)
            raise CompletionError(friendly_completion_error(e)) from e

        content = _extract_content(response)
        logger.info("LLM: completed model=%s (%.2fs)", request["model"], time.monotonic() - t0)
        return content
