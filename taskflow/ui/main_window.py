from __future__ import annotations

import logging

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QInputDialog,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QTabBar,
    QVBoxLayout,
    QWidget,
)

from taskflow.config import SETTINGS
from taskflow.domain.entities import MAX_TEXT_LENGTH
from taskflow.domain.enums import TaskFilter
from taskflow.domain.results import OperationResult
from taskflow.services.task_store import TaskStore

from . import messages
from .messages import Notice
from .widgets import EmptyStateWidget, TaskItemWidget

logger = logging.getLogger(__name__)

FILTERS = [TaskFilter.ALL, TaskFilter.COMPLETED, TaskFilter.PENDING]


class MainWindow(QWidget):
    def __init__(self, store: TaskStore):
        super().__init__()
        self.setWindowTitle("TaskFlow")
        self.resize(560, 720)

        self.store = store
        self._pending_deletes: set[int] = set()

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(12)

        main_layout.addLayout(self._build_header())
        main_layout.addWidget(self._build_input_bar())
        main_layout.addLayout(self._build_stats_row())
        main_layout.addWidget(self._build_filter_tabs())
        main_layout.addWidget(self._build_list_area(), 1)

        self.notification = QLabel("")
        self.notification.setObjectName("Notification")
        self.notification.setWordWrap(True)
        self.notification.hide()
        main_layout.addWidget(self.notification)

        self._notification_timer = QTimer(self)
        self._notification_timer.setSingleShot(True)
        self._notification_timer.timeout.connect(self.notification.hide)

        QShortcut(QKeySequence("Ctrl+Return"), self, self.add_task)
        QShortcut(QKeySequence(Qt.Key_Escape), self.task_input, self.reset_input)

        self.refresh_tasks()
        self.task_input.setFocus()

    def _build_header(self) -> QHBoxLayout:
        header = QHBoxLayout()
        title = QLabel("TaskFlow")
        title.setProperty("class", "panel-title")
        self.clear_button = QPushButton("Clear All")
        self.clear_button.setProperty("variant", "warning")
        self.clear_button.clicked.connect(self.clear_all_tasks)
        header.addWidget(title)
        header.addStretch()
        header.addWidget(self.clear_button)
        return header

    def _build_input_bar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("ActionBar")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(12, 10, 12, 10)

        self.task_input = QLineEdit()
        self.task_input.setPlaceholderText("What needs to be done?")
        self.task_input.setMaxLength(MAX_TEXT_LENGTH * 2)
        self.task_input.returnPressed.connect(self.add_task)

        add_button = QPushButton("Add Task")
        add_button.clicked.connect(self.add_task)

        layout.addWidget(self.task_input, 1)
        layout.addWidget(add_button)
        return frame

    def _build_stats_row(self) -> QHBoxLayout:
        row = QHBoxLayout()
        self.total_label = QLabel()
        self.completed_label = QLabel()
        self.pending_label = QLabel()
        for label in (self.total_label, self.completed_label, self.pending_label):
            label.setProperty("class", "stats-badge")
            row.addWidget(label)
        row.addStretch()
        return row

    def _build_filter_tabs(self) -> QTabBar:
        self.filter_tabs = QTabBar()
        self.filter_tabs.setObjectName("FilterTabs")
        for task_filter in FILTERS:
            index = self.filter_tabs.addTab(messages.FILTER_LABELS[task_filter])
            self.filter_tabs.setTabData(index, task_filter.value)
        self.filter_tabs.setCurrentIndex(FILTERS.index(self.store.filter))
        self.filter_tabs.currentChanged.connect(self.on_filter_change)
        return self.filter_tabs

    def _build_list_area(self) -> QStackedWidget:
        self.list_stack = QStackedWidget()

        self.task_list = QListWidget()
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(6)
        self.task_list.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

        self.empty_state = EmptyStateWidget()

        self.list_stack.addWidget(self.task_list)
        self.list_stack.addWidget(self.empty_state)
        return self.list_stack

    def refresh_tasks(self) -> None:
        tasks = self.store.filtered_tasks()
        self.task_list.clear()

        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(task, self.toggle_task, self.edit_task, self.delete_task)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())

        if tasks:
            self.list_stack.setCurrentWidget(self.task_list)
        else:
            self.empty_state.show_state(messages.empty_state(self.store.filter))
            self.list_stack.setCurrentWidget(self.empty_state)

        self.update_stats()

    def update_stats(self) -> None:
        stats = self.store.stats()
        self.total_label.setText(f"Total: {stats['total']}")
        self.completed_label.setText(f"Completed: {stats['completed']}")
        self.pending_label.setText(f"Pending: {stats['pending']}")
        for index, task_filter in enumerate(FILTERS):
            self.filter_tabs.setTabText(index, messages.filter_tab_label(task_filter, stats))

    def on_filter_change(self, index: int) -> None:
        if index < 0:
            return
        self.store.set_filter(self.filter_tabs.tabData(index))
        self.refresh_tasks()

    def reset_input(self) -> None:
        self.task_input.clear()
        self.task_input.clearFocus()

    def add_task(self) -> None:
        result = self.store.add_task(self.task_input.text())
        if not result.ok:
            self.show_notification(messages.error_notice(result.error))
            return
        self.task_input.clear()
        self.refresh_tasks()
        self._report(result, messages.added_notice())

    def toggle_task(self, task_id: int) -> None:
        result = self.store.toggle_task(task_id)
        # The checkbox that fired this signal is rebuilt by the refresh.
        QTimer.singleShot(0, self.refresh_tasks)
        if not result.ok:
            self.show_notification(messages.error_notice(result.error))
            return
        self._report(result, messages.toggled_notice(result.value))

    def edit_task(self, task_id: int) -> None:
        task = self.store.get_task(task_id)
        if task is None:
            return
        new_text, accepted = QInputDialog.getText(self, "Edit task", "Edit task:", QLineEdit.Normal, task.text)
        if not accepted:
            return
        result = self.store.edit_task(task_id, new_text)
        if not result.ok:
            self.show_notification(messages.error_notice(result.error, editing=True))
            return
        self.refresh_tasks()
        self._report(result, messages.edited_notice())

    def delete_task(self, task_id: int) -> None:
        if task_id in self._pending_deletes:
            return
        confirm = QMessageBox.question(
            self,
            "Delete task",
            "Are you sure you want to delete this task?",
        )
        if confirm != QMessageBox.Yes:
            return

        widget = self._find_task_widget(task_id)
        if widget is None:
            self._finish_delete(task_id)
            return
        widget.mark_removing()
        self._pending_deletes.add(task_id)
        QTimer.singleShot(SETTINGS.remove_delay_ms, lambda: self._finish_delete(task_id))

    def _finish_delete(self, task_id: int) -> None:
        self._pending_deletes.discard(task_id)
        result = self.store.delete_task(task_id)
        self.refresh_tasks()
        if result.value:
            self._report(result, messages.deleted_notice())

    def clear_all_tasks(self) -> None:
        count = self.store.stats()["total"]
        if count == 0:
            self.show_notification(messages.nothing_to_clear_notice())
            return
        confirm = QMessageBox.question(self, "Clear all", messages.clear_confirmation(count))
        if confirm != QMessageBox.Yes:
            return
        result = self.store.clear_all()
        self._pending_deletes.clear()
        self.refresh_tasks()
        self._report(result, messages.cleared_notice())

    def show_notification(self, notice: Notice) -> None:
        self.notification.setText(notice.text)
        self.notification.setStyleSheet(
            f"background-color: {notice.color}; color: white; padding: 10px 14px; border-radius: 10px;"
        )
        self.notification.show()
        self._notification_timer.start(SETTINGS.notification_ms)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        result = self.store.persist()
        if not result.ok:
            logger.error("Tasks were not saved on exit: %s", result.persist_error)
        super().closeEvent(event)

    def _report(self, result: OperationResult, notice: Notice) -> None:
        if not result.persisted:
            self.show_notification(messages.save_failed_notice())
            return
        self.show_notification(notice)

    def _find_task_widget(self, task_id: int) -> TaskItemWidget | None:
        for index in range(self.task_list.count()):
            item = self.task_list.item(index)
            if item.data(Qt.UserRole) == task_id:
                widget = self.task_list.itemWidget(item)
                if isinstance(widget, TaskItemWidget):
                    return widget
        return None
