from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from taskflow.domain.entities import Task
from taskflow.ui.messages import EmptyState


class TaskItemWidget(QWidget):
    def __init__(self, task: Task, on_toggle, on_edit, on_delete, parent=None):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle
        self._on_edit = on_edit
        self._on_delete = on_delete

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setProperty("completed", task.completed)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(8)

        self.done_check = QCheckBox()
        self.done_check.setChecked(task.completed)
        self.done_check.toggled.connect(self._handle_toggle)

        self.text_label = QLabel(task.text)
        self.text_label.setTextFormat(Qt.PlainText)
        self.text_label.setWordWrap(True)
        self.text_label.setProperty("class", "task-text")
        self.text_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        if task.completed:
            font = self.text_label.font()
            font.setStrikeOut(True)
            self.text_label.setFont(font)

        edit_button = QPushButton("Edit")
        edit_button.setProperty("variant", "ghost")
        edit_button.setToolTip("Edit task")
        edit_button.clicked.connect(lambda: self._on_edit(self.task.id))

        self.delete_button = QPushButton("Delete")
        self.delete_button.setProperty("variant", "ghost")
        self.delete_button.setToolTip("Delete task")
        self.delete_button.clicked.connect(lambda: self._on_delete(self.task.id))

        layout.addWidget(self.done_check)
        layout.addWidget(self.text_label, 1)
        layout.addWidget(edit_button)
        layout.addWidget(self.delete_button)

    def _handle_toggle(self, _checked: bool) -> None:
        self._on_toggle(self.task.id)

    def mark_removing(self) -> None:
        self.setProperty("removing", True)
        self.setEnabled(False)
        self.style().unpolish(self)
        self.style().polish(self)


class EmptyStateWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 24, 12, 24)
        layout.setSpacing(6)

        self.icon_label = QLabel()
        self.icon_label.setAlignment(Qt.AlignCenter)
        self.icon_label.setProperty("class", "empty-icon")

        self.title_label = QLabel()
        self.title_label.setAlignment(Qt.AlignCenter)
        self.title_label.setProperty("class", "empty-title")

        self.text_label = QLabel()
        self.text_label.setAlignment(Qt.AlignCenter)

        layout.addWidget(self.icon_label)
        layout.addWidget(self.title_label)
        layout.addWidget(self.text_label)
        layout.addStretch()

    def show_state(self, state: EmptyState) -> None:
        self.icon_label.setText(state.icon)
        self.title_label.setText(state.title)
        self.text_label.setText(state.text)
