from __future__ import annotations

import logging
from pathlib import Path

from taskflow.infra.logging import setup_logging


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    log_file = setup_logging(tmp_path / "logs", level="debug")

    logging.getLogger("taskflow.test").debug("store ready")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert log_file == tmp_path / "logs" / "taskflow.log"
    assert "DEBUG taskflow.test store ready" in log_file.read_text(encoding="utf-8")
    for handler in list(logging.getLogger().handlers):
        logging.getLogger().removeHandler(handler)
        handler.close()
