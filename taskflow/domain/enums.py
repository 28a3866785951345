from __future__ import annotations

from enum import StrEnum


class TaskFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


class TaskError(StrEnum):
    EMPTY_INPUT = "empty_input"
    TOO_LONG = "too_long"
    NOT_FOUND = "not_found"
    PERSISTENCE_FAILURE = "persistence_failure"
