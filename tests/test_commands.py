# tests/test_commands.py

from __future__ import annotations

from prodash.cli.commands import LOGIN_HINT, CommandRegistry, registry
from prodash.core.errors import CompletionError, ValidationError
from prodash.core.models import Theme, VoiceStyle
from prodash.core.state import AppState
from prodash.storage.local_store import KEY_CHAT, KEY_NOTES, KEY_SESSION, KEY_TASKS

from .fakes import FakeLLMClient


def test_registry_routes_two_and_three_param_handlers(state: AppState) -> None:
    reg = CommandRegistry()
    emitted: list[str] = []

    def two(st: AppState, args: list[str]) -> str:
        return "two:" + ",".join(args)

    def three(st: AppState, args: list[str], emit) -> str:
        emit("progress")
        return "three"

    reg.register("two", two, "2 params", requires_session=False)
    reg.register("three", three, "3 params", aliases=["3"], requires_session=False)

    assert reg.handle(state, "/two a b") == "two:a,b"
    assert reg.handle(state, "/3", emit=emitted.append) == "three"
    assert emitted == ["progress"]


def test_registry_non_command_unknown_and_empty(state: AppState) -> None:
    assert registry.handle(state, "hello") is None
    assert registry.handle(state, "/nope").startswith("Unknown command: /nope")
    assert registry.handle(state, "/").startswith("Empty command")


def test_registry_reports_validation_errors(state: AppState) -> None:
    reg = CommandRegistry()

    def boom(st: AppState, args: list[str]) -> str:
        raise ValidationError("Task title cannot be empty")

    reg.register("boom", boom, "raises", requires_session=False)
    assert reg.handle(state, "/boom") == "Error: Task title cannot be empty"


def test_dashboard_commands_require_login(state: AppState) -> None:
    for line in ("/tasks", "/notes", "/chat", "/settings", "/overview", "/delete-account confirm"):
        assert registry.handle(state, line) == LOGIN_HINT
    assert registry.handle(state, "/help").startswith("Available commands:")


def test_login_and_register_flow(state: AppState) -> None:
    assert "Usage" in registry.handle(state, "/login")
    assert registry.handle(state, "/register a@b.c one two") == "Error: Passwords do not match"
    assert state.session is None

    reply = registry.handle(state, "/register a@b.c pw pw")
    assert reply.startswith("Registration successful")
    assert state.session is not None
    assert len(state.tasks) == 3

    assert registry.handle(state, "/forgot a@b.c").startswith("Password reset email sent")


def test_task_commands(logged_in: AppState) -> None:
    reply = registry.handle(logged_in, "/task add Write report | quarterly numbers | 2030-01-15T14:00 | recurring")
    assert reply.startswith("Task added: #")
    task = logged_in.tasks.items[-1]
    assert (task.title, task.description, task.recurring) == ("Write report", "quarterly numbers", True)

    assert registry.handle(logged_in, "/task add   ") == "Error: Task title cannot be empty"
    assert registry.handle(logged_in, "/task add x | | tomorrow").startswith("Error:")
    assert len(logged_in.tasks) == 4

    assert registry.handle(logged_in, f"/task done {task.id}") == f"Task #{task.id} marked completed."
    completed = registry.handle(logged_in, "/tasks completed")
    assert "Write report" in completed
    assert "Write report" not in registry.handle(logged_in, "/tasks active")
    assert registry.handle(logged_in, "/tasks bogus").startswith("Error:")

    assert registry.handle(logged_in, f"/task rm {task.id}") == "Task deleted."
    assert registry.handle(logged_in, f"/task rm {task.id}") == f"No task with id {task.id}."
    assert registry.handle(logged_in, "/task done abc").startswith("Task id must be a number")
    assert len(logged_in.store.read(KEY_TASKS)) == 3


def test_note_commands_and_search(logged_in: AppState) -> None:
    reply = registry.handle(logged_in, "/note add Trip plan | pack bags | travel, personal, travel")
    assert reply.startswith("Note created: #")
    note = logged_in.notes.items[-1]
    assert note.tags == ["travel", "personal"]

    assert "Trip plan" in registry.handle(logged_in, "/notes tags trav")
    assert "Trip plan" not in registry.handle(logged_in, "/notes title bags")
    assert registry.handle(logged_in, "/notes zzz-nothing").endswith("No notes match your search.")

    assert registry.handle(logged_in, f"/note rm {note.id}") == "Note deleted."
    assert len(logged_in.store.read(KEY_NOTES)) == 2


def test_key_command(logged_in: AppState) -> None:
    assert registry.handle(logged_in, "/key") == "API key: (not set)"
    registry.handle(logged_in, "/key sk-abcdefghijkl")
    assert registry.handle(logged_in, "/key") == "API key: sk-...ijkl"
    assert logged_in.chat.needs_credential() is False
    assert registry.handle(logged_in, "/key clear") == "API key removed."
    assert logged_in.chat.needs_credential() is True


def test_settings_command_persists_and_changes_voice(logged_in: AppState, llm: FakeLLMClient) -> None:
    assert registry.handle(logged_in, "/settings theme dark").startswith("Settings saved")
    assert registry.handle(logged_in, "/settings voice professional").startswith("Settings saved")
    assert registry.handle(logged_in, "/settings sound maybe") == "Usage: /settings sound on|off"
    assert registry.handle(logged_in, "/settings theme neon").startswith("Error:")
    registry.handle(logged_in, "/settings name Ada Lovelace")

    assert logged_in.preferences.theme == Theme.DARK
    assert logged_in.preferences_store.load().voice_style == VoiceStyle.PROFESSIONAL
    assert logged_in.session.name == "Ada Lovelace"

    registry.handle(logged_in, "/key sk-test")
    logged_in.chat.send("hi")
    _, system_prompt, _ = llm.calls[-1]
    assert "professional" in system_prompt.lower()


def test_chat_clear_and_overview(logged_in: AppState) -> None:
    registry.handle(logged_in, "/key sk-test")
    logged_in.chat.send("hello")
    assert len(logged_in.chat.history) == 3

    assert registry.handle(logged_in, "/chat clear") == "Chat history has been cleared."
    assert len(logged_in.store.read(KEY_CHAT)) == 1

    overview = registry.handle(logged_in, "/overview")
    assert "Tasks: 3 total, 3 active, 0 completed (0% done)" in overview
    assert "Notes: 2" in overview


def test_news_command(logged_in: AppState) -> None:
    assert registry.handle(logged_in, "/news").startswith("News (all)")
    assert registry.handle(logged_in, "/news sports").startswith("News (sports)")
    assert registry.handle(logged_in, "/news gossip").startswith("Unknown category")


def test_delete_account_requires_confirm(logged_in: AppState) -> None:
    assert "confirm" in registry.handle(logged_in, "/delete-account")
    assert logged_in.session is not None

    assert registry.handle(logged_in, "/delete-account confirm").startswith("Account deleted")
    assert logged_in.session is None
    for key in (KEY_SESSION, KEY_TASKS, KEY_NOTES, KEY_CHAT):
        assert logged_in.store.read(key) is None


def test_logout_then_login_keeps_data(logged_in: AppState) -> None:
    registry.handle(logged_in, "/task add Keep me")
    assert registry.handle(logged_in, "/logout") == "Logged out."
    assert registry.handle(logged_in, "/tasks") == LOGIN_HINT

    registry.handle(logged_in, "/login ada@example.com pw")
    assert logged_in.tasks.items[-1].title == "Keep me"


def test_lone_scope_word_is_searched_as_text(logged_in: AppState) -> None:
    registry.handle(logged_in, "/note add Release tags | bump version")

    reply = registry.handle(logged_in, "/notes tags")

    assert reply.startswith("Notes: 1 of 3 matching 'tags' in all")
    assert "Release tags" in reply
    assert registry.handle(logged_in, "/notes tags release").startswith("Notes: 0 of 3")


def test_chat_command_sends_with_progress(logged_in: AppState, llm: FakeLLMClient) -> None:
    emitted: list[str] = []
    reply = registry.handle(logged_in, "/chat plan my day", emit=emitted.append)
    assert reply == "Error: Add your API key with /key <your key> before chatting."
    assert emitted == []
    assert len(logged_in.chat.history) == 1

    registry.handle(logged_in, "/key sk-test")
    reply = registry.handle(logged_in, "/chat plan my day", emit=emitted.append)

    assert reply == "<<< prodash: Sure, here is a plan."
    assert emitted == ["... thinking"]
    messages, _, _ = llm.calls[-1]
    assert messages[-1] == {"role": "user", "content": "plan my day"}
    assert "plan my day" in registry.handle(logged_in, "/chat")


def test_chat_command_reports_failure_notice(logged_in: AppState, llm: FakeLLMClient) -> None:
    registry.handle(logged_in, "/key sk-test")
    llm.error = CompletionError("HTTP 500")

    reply = registry.handle(logged_in, "/chat hello")

    assert reply.splitlines()[-1] == "[!] Failed to get a response: HTTP 500"
    assert len(logged_in.chat.history) == 3
