from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from taskflow.domain.entities import MAX_TEXT_LENGTH, Task, utcnow
from taskflow.domain.enums import TaskError, TaskFilter
from taskflow.domain.filters import apply_filter
from taskflow.domain.results import OperationResult
from taskflow.infra.repository import PersistenceError, TaskRepository

logger = logging.getLogger(__name__)


class TaskStore:
    """Owns the task list, the id sequence and the active filter.

    Every mutation is applied in memory first and then written through the
    repository. A failed write never undoes the in-memory change; it is
    reported on the returned result instead.
    """

    def __init__(self, repo: TaskRepository, clock: Callable[[], datetime] = utcnow) -> None:
        self._repo = repo
        self._clock = clock
        self._tasks: list[Task] = []
        self._next_id = 1
        self._filter = TaskFilter.ALL
        self.load()

    def load(self) -> None:
        state = self._repo.load()
        self._tasks = list(state.tasks)
        max_id = max((task.id for task in self._tasks), default=0)
        self._next_id = max(state.counter or 1, max_id + 1, 1)
        logger.info("TaskStore loaded tasks=%s next_id=%s", len(self._tasks), self._next_id)

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def get_task(self, task_id: int) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def add_task(self, text: str) -> OperationResult[Task]:
        cleaned, error = self._validate_text(text)
        if error:
            return OperationResult.failure(error)

        task = Task(
            id=self._next_id,
            text=cleaned,
            completed=False,
            created_at=self._clock(),
            completed_at=None,
        )
        self._next_id += 1
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s", task.id)
        return OperationResult.success(task, self._persist_quietly())

    def toggle_task(self, task_id: int) -> OperationResult[Task]:
        index = self._index_of(task_id)
        if index is None:
            return OperationResult.failure(TaskError.NOT_FOUND)

        task = self._tasks[index]
        completed = not task.completed
        updated = replace(
            task,
            completed=completed,
            completed_at=self._clock() if completed else None,
        )
        self._tasks[index] = updated
        logger.debug("Task toggled id=%s completed=%s", task_id, completed)
        return OperationResult.success(updated, self._persist_quietly())

    def edit_task(self, task_id: int, new_text: str) -> OperationResult[Task]:
        index = self._index_of(task_id)
        if index is None:
            return OperationResult.failure(TaskError.NOT_FOUND)
        cleaned, error = self._validate_text(new_text)
        if error:
            return OperationResult.failure(error)

        updated = replace(self._tasks[index], text=cleaned)
        self._tasks[index] = updated
        logger.debug("Task edited id=%s", task_id)
        return OperationResult.success(updated, self._persist_quietly())

    def delete_task(self, task_id: int) -> OperationResult[bool]:
        index = self._index_of(task_id)
        if index is None:
            return OperationResult.success(False)
        del self._tasks[index]
        logger.debug("Task deleted id=%s", task_id)
        return OperationResult.success(True, self._persist_quietly())

    def clear_all(self) -> OperationResult[int]:
        removed = len(self._tasks)
        self._tasks = []
        logger.debug("Tasks cleared count=%s", removed)
        return OperationResult.success(removed, self._persist_quietly())

    def set_filter(self, task_filter: TaskFilter | str) -> None:
        self._filter = TaskFilter(task_filter)

    def filtered_tasks(self) -> tuple[Task, ...]:
        return apply_filter(self._tasks, self._filter)

    def stats(self) -> dict[str, int]:
        total = len(self._tasks)
        completed = sum(1 for task in self._tasks if task.completed)
        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
        }

    def persist(self) -> OperationResult[None]:
        try:
            self._repo.save(self._tasks, self._next_id)
        except PersistenceError as exc:
            logger.error("Failed to save tasks: %s", exc)
            return OperationResult(error=TaskError.PERSISTENCE_FAILURE, persist_error=str(exc))
        return OperationResult()

    def _persist_quietly(self) -> str | None:
        return self.persist().persist_error

    def _index_of(self, task_id: int) -> int | None:
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                return index
        return None

    @staticmethod
    def _validate_text(text: str) -> tuple[str, TaskError | None]:
        cleaned = (text or "").strip()
        if not cleaned:
            return cleaned, TaskError.EMPTY_INPUT
        if len(cleaned) > MAX_TEXT_LENGTH:
            return cleaned, TaskError.TOO_LONG
        return cleaned, None
