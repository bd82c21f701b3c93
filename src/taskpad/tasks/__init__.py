"""
Task subsystem.

Components:
- task_models.py: the Task record and its stored JSON shape
- task_store.py: owner of the task list, whole-list persistence + search
"""

from .task_models import Task
from .task_store import TaskStore

__all__ = ["Task", "TaskStore"]
