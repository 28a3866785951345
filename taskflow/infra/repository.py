from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from taskflow.domain.entities import MAX_TEXT_LENGTH, Task

from .storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

TASKS_KEY = "taskflow-tasks"
COUNTER_KEY = "taskflow-counter"


class PersistenceError(Exception):
    """Task state could not be written to (or read from) storage."""


@dataclass(frozen=True)
class PersistedState:
    tasks: tuple[Task, ...] = ()
    counter: int | None = None


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {type(raw).__name__}")
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": format_timestamp(task.created_at),
        "completedAt": format_timestamp(task.completed_at) if task.completed_at else None,
    }


def _from_record(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise ValueError("record is not an object")

    task_id = raw.get("id")
    if not isinstance(task_id, int) or isinstance(task_id, bool):
        raise ValueError(f"invalid id {task_id!r}")

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        raise ValueError("empty text")
    text = text.strip()
    if len(text) > MAX_TEXT_LENGTH:
        raise ValueError(f"text longer than {MAX_TEXT_LENGTH} characters")

    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        raise ValueError(f"invalid completed flag {completed!r}")

    created_at = parse_timestamp(raw.get("createdAt"))
    completed_at = None
    if completed:
        raw_completed_at = raw.get("completedAt")
        completed_at = parse_timestamp(raw_completed_at) if raw_completed_at is not None else created_at

    return Task(
        id=task_id,
        text=text,
        completed=completed,
        created_at=created_at,
        completed_at=completed_at,
    )


class TaskRepository:
    """Reads and writes task state as JSON strings in a key-value storage."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load(self) -> PersistedState:
        try:
            raw_tasks = self._storage.get_item(TASKS_KEY)
            raw_counter = self._storage.get_item(COUNTER_KEY)
        except StorageError:
            logger.warning("Failed to load tasks, starting empty", exc_info=True)
            return PersistedState()

        return PersistedState(
            tasks=self._parse_tasks(raw_tasks),
            counter=self._parse_counter(raw_counter),
        )

    def save(self, tasks: Iterable[Task], next_id: int) -> None:
        try:
            payload = json.dumps([_to_record(task) for task in tasks])
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"cannot serialize tasks: {exc}") from exc
        try:
            self._storage.set_items({TASKS_KEY: payload, COUNTER_KEY: str(next_id)})
        except StorageError as exc:
            raise PersistenceError(str(exc)) from exc
        except UnicodeError as exc:
            raise PersistenceError(f"cannot encode tasks: {exc}") from exc

    @staticmethod
    def _parse_tasks(raw: str | None) -> tuple[Task, ...]:
        if raw is None:
            return ()
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Stored tasks are not valid JSON, starting empty: %s", type(exc).__name__)
            return ()
        if not isinstance(data, list):
            logger.warning("Stored tasks are not a list (%s), starting empty", type(data).__name__)
            return ()

        tasks: list[Task] = []
        seen: set[int] = set()
        for index, record in enumerate(data):
            try:
                task = _from_record(record)
            except ValueError as exc:
                logger.warning("Skipping stored task #%s: %s", index, exc)
                continue
            if task.id in seen:
                logger.warning("Skipping stored task #%s: duplicate id %s", index, task.id)
                continue
            seen.add(task.id)
            tasks.append(task)
        return tuple(tasks)

    @staticmethod
    def _parse_counter(raw: str | None) -> int | None:
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Stored id counter %r is not an integer, ignoring", raw)
            return None
