from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .enums import TaskError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a TaskStore call.

    ``error`` is set when the call was rejected and nothing changed.
    ``persist_error`` is set when the in-memory change was applied but could
    not be written to storage.
    """

    value: T | None = None
    error: TaskError | None = None
    persist_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def persisted(self) -> bool:
        return self.persist_error is None

    @classmethod
    def success(cls, value: T, persist_error: str | None = None) -> "OperationResult[T]":
        return cls(value=value, persist_error=persist_error)

    @classmethod
    def failure(cls, error: TaskError) -> "OperationResult[T]":
        return cls(error=error)
