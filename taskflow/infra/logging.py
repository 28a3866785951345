from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from taskflow.config import PROJECT_ROOT, SETTINGS

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE_NAME = "taskflow.log"


def setup_logging(log_dir: Path | None = None, level: str | None = None) -> Path:
    """Send records to the console and to a size-rotated file; returns the file path."""
    target_dir = log_dir or PROJECT_ROOT / SETTINGS.log_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / LOG_FILE_NAME

    handlers: list[logging.Handler] = [
        RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=(level or SETTINGS.log_level).upper(), handlers=handlers, force=True)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return log_file
