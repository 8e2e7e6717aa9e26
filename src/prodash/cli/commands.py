# src/prodash/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import cast

from ..core.errors import DashboardError
from ..core.filters import filter_tasks, search_notes, task_counts
from ..core.models import NoteScope, TaskFilter, Theme, VoiceStyle, parse_choice
from ..core.news import CATEGORIES, list_articles
from ..core.overview import build_overview
from ..core.preferences import CredentialStore, resolve_theme
from ..core.state import AppState
from .render import bullet_list, format_article, format_message, format_note, format_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

LOGIN_HINT = "Please log in first: /login <email> <password> (or /register)."


class CommandRegistry:
    """Slash-command registry used by the console (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._needs_session: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        requires_session: bool = True,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
        if requires_session:
            self._needs_session.update([key, *(a.lower() for a in aliases)])

    def handle(self, state: AppState, line: str, emit: CommandEmitter | None = None) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation/auth failures are reported inline; nothing was mutated in that case.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._needs_session and state.session is None:
            return LOGIN_HINT

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except DashboardError as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Anything that is not a command is sent to the chat assistant.")
        return "\n".join(lines)


registry = CommandRegistry()


def _fields(args: list[str]) -> list[str]:
    """Split 'a b | c | d' into ['a b', 'c', 'd']."""
    return [f.strip() for f in " ".join(args).split("|")]


def _parse_switch(raw: str) -> bool | None:
    v = raw.strip().lower()
    if v in ("on", "1", "true", "yes"):
        return True
    if v in ("off", "0", "false", "no"):
        return False
    return None


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


# ---- open commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    who = state.session.display_name if state.session else "(not logged in)"
    demo = bool(getattr(state.settings, "chat_demo_mode", False))
    model = "offline demo" if demo else str(getattr(state.settings, "chat_model", "?"))
    return (
        "Status:\n"
        f"  User: {who}\n"
        f"  Chat model: {model}\n"
        f"  API key: {CredentialStore.mask(state.credentials.get())}\n"
        f"  Store: {state.store.path}"
    )


def cmd_login(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /login <email> <password>"
    password = args[1] if len(args) > 1 else ""
    state.session = state.sessions.login(args[0], password)
    state.load_collections()
    return "Login successful! Welcome to Productivity Dashboard."


def cmd_register(state: AppState, args: list[str]) -> str:
    if len(args) < 3:
        return "Usage: /register <email> <password> <confirm password>"
    state.session = state.sessions.register(args[0], args[1], args[2])
    state.load_collections()
    return "Registration successful! Welcome to Productivity Dashboard."


def cmd_forgot(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /forgot <email>"
    return state.sessions.request_password_reset(args[0])


# ---- dashboard views (session required) ----


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.sessions.logout()
    state.session = None
    return "Logged out."


def cmd_delete_account(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() != "confirm":
        return "This deletes your account and all data (tasks, notes, chat, settings). Run /delete-account confirm"
    state.sessions.delete_account()
    state.session = None
    state.unload_collections()
    return "Account deleted: your account and all associated data have been removed."


def cmd_overview(state: AppState, args: list[str]) -> str:
    ov = build_overview(state, headlines=len(list_articles()))
    who = state.session.display_name if state.session else "User"
    return (
        f"Dashboard for {who}\n"
        f"  Tasks: {ov.tasks.total} total, {ov.tasks.active} active, {ov.tasks.completed} completed "
        f"({ov.progress_percent}% done)\n"
        f"  Notes: {ov.notes}\n"
        f"  Chat messages: {ov.chat_messages}\n"
        f"  News: {ov.headlines} headlines today (/news)"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks                     -> all tasks
    /tasks active|completed    -> filtered view
    """
    mode = parse_choice(TaskFilter, args[0], field_name="Filter") if args else TaskFilter.ALL
    visible = filter_tasks(state.tasks, mode)
    counts = task_counts(state.tasks)
    header = f"Tasks ({mode.value}): {len(visible)} shown - {counts.completed}/{counts.total} completed"
    empty = "  No completed tasks yet." if mode == TaskFilter.COMPLETED else "  No tasks. Add one with /task add <title>."
    return header + "\n" + bullet_list([format_task(t) for t in visible], empty=empty)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add <title> [| description [| due ISO-8601 [| recurring]]]
    /task done <id>   -> toggle completion
    /task rm <id>
    """
    usage = "Usage: /task add <title> [| description [| due [| recurring]]] | /task done <id> | /task rm <id>"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add":
        fields = _fields(args[1:]) + ["", "", "", ""]
        title, description, due, recurring_raw = fields[:4]
        recurring = _parse_switch(recurring_raw) or recurring_raw.lower() == "recurring"
        task = state.tasks.add(title, description=description, due_date=due or None, recurring=recurring)
        return f"Task added: #{task.id} {task.title}"

    if sub in ("done", "toggle", "rm", "del", "delete"):
        task_id = _parse_id(args[1]) if len(args) > 1 else None
        if task_id is None:
            return "Task id must be a number, e.g. /task done 3"
        if sub in ("done", "toggle"):
            task = state.tasks.toggle(task_id)
            if task is None:
                return f"No task with id {task_id}."
            return f"Task #{task.id} marked {'completed' if task.completed else 'active'}."
        if state.tasks.remove(task_id):
            return "Task deleted."
        return f"No task with id {task_id}."

    return usage


def cmd_notes(state: AppState, args: list[str]) -> str:
    """
    /notes                          -> all notes
    /notes <query>                  -> search title, content and tags
    /notes title|content|tags <q>   -> search one field (a lone scope word is a query)
    """
    scope = NoteScope.ALL
    rest = args
    if len(args) > 1 and args[0].lower() in {s.value for s in NoteScope}:
        scope = NoteScope(args[0].lower())
        rest = args[1:]
    query = " ".join(rest)

    found = search_notes(state.notes, query, scope)
    header = f"Notes: {len(found)} of {len(state.notes)}"
    if query:
        header += f" matching {query!r} in {scope.value}"
    empty = "  No notes match your search." if query else "  No notes. Add one with /note add <title>."
    return header + "\n" + bullet_list([format_note(n) for n in found], empty=empty)


def cmd_note(state: AppState, args: list[str]) -> str:
    """
    /note add <title> [| content [| tag1, tag2, ...]]
    /note rm <id>
    """
    usage = "Usage: /note add <title> [| content [| tag1, tag2]] | /note rm <id>"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add":
        fields = _fields(args[1:]) + ["", "", ""]
        title, content, tags_raw = fields[:3]
        tags = tags_raw.split(",") if tags_raw else []
        note = state.notes.add(title, content=content, tags=tags)
        return f"Note created: #{note.id} {note.title}"

    if sub in ("rm", "del", "delete"):
        note_id = _parse_id(args[1]) if len(args) > 1 else None
        if note_id is None:
            return "Note id must be a number, e.g. /note rm 2"
        if state.notes.remove(note_id):
            return "Note deleted."
        return f"No note with id {note_id}."

    return usage


def cmd_chat(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /chat          -> show the transcript
    /chat clear    -> reset to the welcome message
    /chat <text>   -> send a message (progress goes through emit)
    """
    name = str(getattr(state.settings, "app_name", "assistant"))
    if len(args) == 1 and args[0].lower() == "clear":
        state.chat.clear()
        return "Chat history has been cleared."
    if not args:
        lines = [format_message(m, assistant_name=name) for m in state.chat.history]
        return bullet_list(lines, empty="  (no messages)")

    # MissingCredentialError / ChatBusyError propagate to the registry as "Error: ...".
    text = " ".join(args)
    if emit is not None and not state.chat.needs_credential():
        emit("... thinking")
    outcome = state.chat.send(text)
    if outcome is None:
        return "Nothing to send."
    reply = f"<<< {name}: {outcome.reply.text}"
    if outcome.notice:
        reply += f"\n[!] Failed to get a response: {outcome.notice}"
    return reply


def cmd_key(state: AppState, args: list[str]) -> str:
    """
    /key             -> show whether a key is stored
    /key <api key>   -> store it (not validated until the first chat request)
    /key clear       -> remove it
    """
    if not args:
        return f"API key: {CredentialStore.mask(state.credentials.get())}"
    if args[0].lower() in ("clear", "remove", "none"):
        state.credentials.clear()
        return "API key removed."
    state.credentials.set(args[0])
    return "API key saved. It will be used for the next chat message."


def cmd_news(state: AppState, args: list[str]) -> str:
    category = args[0].lower() if args else "all"
    if category != "all" and category not in CATEGORIES:
        return f"Unknown category. Choose one of: all, {', '.join(CATEGORIES)}"
    articles = list_articles(category)
    header = f"News ({category})"
    return header + "\n" + bullet_list(
        [format_article(a) for a in articles],
        empty="  No articles available in this category. Please check back later.",
    )


def cmd_settings(state: AppState, args: list[str]) -> str:
    """
    /settings                          -> show
    /settings theme light|dark|system
    /settings notifications on|off
    /settings sound on|off
    /settings voice calm|professional|friendly
    /settings name <display name>
    """
    prefs = state.preferences
    if not args:
        name = state.session.name if state.session and state.session.name else "(not set)"
        effective = resolve_theme(prefs.theme)
        return (
            "Settings:\n"
            f"  Theme: {prefs.theme.value} (effective: {effective.value})\n"
            f"  Notifications: {'on' if prefs.notifications else 'off'}\n"
            f"  Sound: {'on' if prefs.sound_enabled else 'off'}\n"
            f"  Voice: {prefs.voice_style.value}\n"
            f"  Name: {name}"
        )

    usage = "Usage: /settings theme|notifications|sound|voice|name <value>"
    if len(args) < 2:
        return usage

    field_name = args[0].lower()
    value = " ".join(args[1:])

    if field_name == "name":
        if state.session is not None:
            state.sessions.update_name(state.session, value)
        return "Settings saved: your preferences have been updated."

    if field_name == "theme":
        prefs = replace(prefs, theme=parse_choice(Theme, value, field_name="Theme"))
    elif field_name == "voice":
        prefs = replace(prefs, voice_style=parse_choice(VoiceStyle, value, field_name="Voice"))
    elif field_name in ("notifications", "sound"):
        switch = _parse_switch(value)
        if switch is None:
            return f"Usage: /settings {field_name} on|off"
        if field_name == "notifications":
            prefs = replace(prefs, notifications=switch)
        else:
            prefs = replace(prefs, sound_enabled=switch)
    else:
        return usage

    state.preferences_store.save(prefs)
    state.preferences = prefs
    return "Settings saved: your preferences have been updated."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"], requires_session=False)
registry.register("status", cmd_status, help_text="Show user, chat model and API key status.", requires_session=False)
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.", requires_session=False)
registry.register(
    "register",
    cmd_register,
    help_text="Create an account: /register <email> <password> <confirm>.",
    requires_session=False,
)
registry.register("forgot", cmd_forgot, help_text="Password reset: /forgot <email>.", requires_session=False)
registry.register("overview", cmd_overview, help_text="Dashboard summary.", aliases=["dashboard"])
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [all|active|completed].")
registry.register("task", cmd_task, help_text="/task add <title> [| desc [| due [| recurring]]] | done <id> | rm <id>.")
registry.register("notes", cmd_notes, help_text="List/search notes: /notes [all|title|content|tags] [query].")
registry.register("note", cmd_note, help_text="/note add <title> [| content [| tag1, tag2]] | rm <id>.")
registry.register("chat", cmd_chat, help_text="Show the chat transcript, send with /chat <text>, or /chat clear.")
registry.register("key", cmd_key, help_text="Set the chat API key: /key <key> | /key clear.")
registry.register("news", cmd_news, help_text=f"Headlines: /news [all|{'|'.join(CATEGORIES)}].")
registry.register("settings", cmd_settings, help_text="Show or change settings: /settings <field> <value>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("delete-account", cmd_delete_account, help_text="Delete your account and all data.")
