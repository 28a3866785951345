from __future__ import annotations

import logging
import sys

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QApplication, QMessageBox, QStyleFactory

from taskflow.config import SETTINGS
from taskflow.infra.logging import setup_logging
from taskflow.infra.repository import TaskRepository
from taskflow.infra.storage import KeyValueStorage, MemoryKeyValueStorage, SqlKeyValueStorage, StorageError
from taskflow.services.task_store import TaskStore
from taskflow.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def open_storage(database_url: str) -> tuple[KeyValueStorage, str | None]:
    """Open the configured storage, or an in-memory one when it is unavailable."""
    try:
        return SqlKeyValueStorage(database_url), None
    except StorageError as exc:
        logger.warning("Storage unavailable, tasks will not survive a restart: %s", exc)
        return MemoryKeyValueStorage(), str(exc)


def main() -> None:
    setup_logging()
    app = QApplication(sys.argv)
    app.setStyle(QStyleFactory.create("Fusion"))
    app.setFont(QFont("Segoe UI", 10))

    storage, storage_error = open_storage(SETTINGS.database_url)
    store = TaskStore(TaskRepository(storage))

    window = MainWindow(store)
    window.show()
    if storage_error:
        QMessageBox.warning(
            window,
            "Storage error",
            f"Tasks will only be kept for this session.\n{storage_error}",
        )
    logger.info("TaskFlow initialized")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
