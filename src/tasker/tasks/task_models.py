# src/tasker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Task:
    id: int
    description: str
    completed: bool = False

    @property
    def status_mark(self) -> str:
        """Checkbox shown by `list`: "[x]" when done, "[ ]" otherwise."""
        return "[x]" if self.completed else "[ ]"
