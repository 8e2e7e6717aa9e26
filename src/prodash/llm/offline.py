# src/prodash/llm/offline.py

from __future__ import annotations

from ..core.ports import PromptMessage


class OfflineLLMClient:
    """
    Offline deterministic responder used in demo mode (no external API, no credential).

    Answers with canned replies picked by keyword from the latest user turn.
    """

    requires_credential = False

    def complete(
        self,
        messages: list[PromptMessage],
        system_prompt: str,
        *,
        api_key: str | None = None,
    ) -> str:
        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break
        return canned_reply(user_text)


def canned_reply(text: str) -> str:
    t = (text or "").lower()

    if "hello" in t or "hi" in t:
        return "Hello! How can I assist you today?"
    if "help" in t:
        return "I can help you manage tasks, take notes, or answer questions. Just let me know what you need!"
    if "weather" in t:
        return (
            "I'm sorry, I don't have access to real-time weather data. "
            "Switch off demo mode and add an API key for full answers."
        )
    if "task" in t or "todo" in t:
        return "You can manage your tasks with /tasks and /task add. Would you like help creating one?"
    if "note" in t:
        return "You can create and manage notes with /notes and /note add. Would you like help creating one?"
    if "thank" in t:
        return "You're welcome! Is there anything else I can help you with?"
    if "feature" in t or "do" in t:
        return "I can help with tasks, notes, questions and more. With an API key configured I'm even more capable!"
    return (
        f'I understand you\'re asking about "{text}". '
        "I'm running in demo mode with limited capabilities; set an API key and disable "
        "PRODASH_CHAT_DEMO_MODE for real responses."
    )
