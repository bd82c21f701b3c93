# src/taskpad/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    is_completed: bool = False

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isCompleted": self.is_completed}

    @classmethod
    def from_record(cls, raw: Any) -> Task:
        """
        Build a Task from one stored record.

        Accepts both the current shape ({"id", "text", "isCompleted"}) and the
        older home-screen shape ({"id", "title", "complete"}).

        Raises ValueError if the record is not usable.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        if task_id is None or str(task_id).strip() == "":
            raise ValueError("task record has no id")

        text = raw.get("text", raw.get("title"))
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"task record id={task_id} has no text")

        done = raw.get("isCompleted", raw.get("complete", False))
        if not isinstance(done, bool):
            raise ValueError(f"task record id={task_id} has non-boolean completion {done!r}")
        return cls(id=str(task_id), text=text.strip(), is_completed=done)
