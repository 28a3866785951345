from __future__ import annotations

from dataclasses import dataclass

from taskflow.domain.entities import MAX_TEXT_LENGTH, Task
from taskflow.domain.enums import TaskError, TaskFilter

NOTIFICATION_COLORS = {
    "success": "#10b981",
    "error": "#ef4444",
    "warning": "#f59e0b",
    "info": "#667eea",
}

ERROR_MESSAGES = {
    TaskError.EMPTY_INPUT: ("Please enter a task!", "warning"),
    TaskError.TOO_LONG: (f"Task is too long! Maximum {MAX_TEXT_LENGTH} characters.", "error"),
    TaskError.NOT_FOUND: ("Task not found!", "warning"),
    TaskError.PERSISTENCE_FAILURE: ("Failed to save tasks!", "error"),
}

FILTER_LABELS = {
    TaskFilter.ALL: "All",
    TaskFilter.COMPLETED: "Completed",
    TaskFilter.PENDING: "Pending",
}


@dataclass(frozen=True)
class Notice:
    text: str
    level: str = "info"

    @property
    def color(self) -> str:
        return NOTIFICATION_COLORS.get(self.level, NOTIFICATION_COLORS["info"])


@dataclass(frozen=True)
class EmptyState:
    icon: str
    title: str
    text: str


EMPTY_STATES = {
    TaskFilter.ALL: EmptyState("📋", "No tasks yet", "Add your first task to get started!"),
    TaskFilter.COMPLETED: EmptyState("✅", "No completed tasks", "Complete some tasks to see them here!"),
    TaskFilter.PENDING: EmptyState("🕒", "No pending tasks", "Great job! All tasks are completed!"),
}


def error_notice(error: TaskError, *, editing: bool = False) -> Notice:
    if editing and error == TaskError.EMPTY_INPUT:
        return Notice("Task cannot be empty!", "warning")
    text, level = ERROR_MESSAGES[error]
    return Notice(text, level)


def save_failed_notice() -> Notice:
    return error_notice(TaskError.PERSISTENCE_FAILURE)


def added_notice() -> Notice:
    return Notice("Task added successfully!", "success")


def toggled_notice(task: Task) -> Notice:
    if task.completed:
        return Notice("Task completed! 🎉", "success")
    return Notice("Task marked as pending", "info")


def edited_notice() -> Notice:
    return Notice("Task updated!", "success")


def deleted_notice() -> Notice:
    return Notice("Task deleted!", "info")


def cleared_notice() -> Notice:
    return Notice("All tasks cleared!", "info")


def nothing_to_clear_notice() -> Notice:
    return Notice("No tasks to clear!", "info")


def clear_confirmation(count: int) -> str:
    return f"Are you sure you want to delete all {count} tasks?"


def empty_state(task_filter: TaskFilter) -> EmptyState:
    return EMPTY_STATES.get(task_filter, EMPTY_STATES[TaskFilter.ALL])


def filter_tab_label(task_filter: TaskFilter, stats: dict[str, int]) -> str:
    count_key = "total" if task_filter == TaskFilter.ALL else task_filter.value
    return f"{FILTER_LABELS[task_filter]} ({stats[count_key]})"
