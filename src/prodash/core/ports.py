# src/prodash/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The chat service depends on a Protocol instead of a concrete SDK client.
This keeps the completion provider swappable and makes testing easier.
"""

from typing import Protocol

PromptMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Single-shot chat completion client (OpenAI-compatible)."""

    # False for clients that never reach the network (offline demo responder).
    requires_credential: bool

    def complete(
            self,
            messages: list[PromptMessage],
            system_prompt: str,
            *,
            api_key: str | None,
    ) -> str: ...
