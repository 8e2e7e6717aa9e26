# src/prodash/core/overview.py

from __future__ import annotations

from dataclasses import dataclass

from .filters import TaskCounts, task_counts
from .state import AppState


@dataclass(frozen=True, slots=True)
class Overview:
    tasks: TaskCounts
    notes: int
    chat_messages: int
    headlines: int

    @property
    def progress_percent(self) -> int:
        return round(self.tasks.completion_ratio * 100)


def build_overview(state: AppState, *, headlines: int = 0) -> Overview:
    return Overview(
        tasks=task_counts(state.tasks),
        notes=len(state.notes),
        chat_messages=len(state.chat.history),
        headlines=headlines,
    )
