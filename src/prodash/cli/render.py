# src/prodash/cli/render.py

"""Plain-text rendering of dashboard entities for the console."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..core.models import ChatMessage, Note, Sender, Task, parse_iso
from ..core.news import NewsArticle


def format_due(raw: str, *, now: datetime | None = None) -> str:
    """'Today at 14:00', 'Tomorrow at 09:00', otherwise 'Sat, May 17, 14:00'."""
    try:
        due = parse_iso(raw).astimezone()
    except ValueError:
        return raw
    today = (now or datetime.now().astimezone()).date()
    hhmm = due.strftime("%H:%M")
    if due.date() == today:
        return f"Today at {hhmm}"
    if due.date() == today + timedelta(days=1):
        return f"Tomorrow at {hhmm}"
    return f"{due.strftime('%a, %b')} {due.day}, {hhmm}"


def format_date(raw: str) -> str:
    try:
        dt = parse_iso(raw).astimezone()
    except ValueError:
        return raw
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_task(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    recurring = " (recurring)" if task.recurring else ""
    line = f"{box} #{task.id} {task.title}{recurring} - due {format_due(task.due_date)}"
    if task.description:
        line += f"\n      {task.description}"
    return line


def format_note(note: Note) -> str:
    tags = f" [{', '.join(note.tags)}]" if note.tags else ""
    head = f"#{note.id} {note.title}{tags} ({format_date(note.created_at)})"
    if not note.content:
        return head
    body = "\n".join(f"      {line}" for line in note.content.splitlines())
    return f"{head}\n{body}"


def format_message(msg: ChatMessage, *, assistant_name: str = "assistant") -> str:
    ts = datetime.fromtimestamp(msg.timestamp / 1000).strftime("%H:%M")
    who = "You" if msg.sender == Sender.USER else assistant_name
    return f"[{ts}] {who}: {msg.text}"


def format_article(article: NewsArticle) -> str:
    return (
        f"{article.title}\n"
        f"      {article.source} - {format_date(article.published_at)} - {article.category}\n"
        f"      {article.description}"
    )


def bullet_list(lines: list[str], *, empty: str) -> str:
    if not lines:
        return empty
    return "\n".join(f"  {line}" for line in lines)
