from __future__ import annotations

from collections.abc import Iterable

from .entities import Task
from .enums import TaskFilter


def apply_filter(tasks: Iterable[Task], task_filter: TaskFilter) -> tuple[Task, ...]:
    if task_filter == TaskFilter.COMPLETED:
        return tuple(task for task in tasks if task.completed)
    if task_filter == TaskFilter.PENDING:
        return tuple(task for task in tasks if not task.completed)
    return tuple(tasks)
