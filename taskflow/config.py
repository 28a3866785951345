from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


# Frozen builds keep .env and logs next to the executable.
PROJECT_ROOT = (
    Path(sys.executable).resolve().parent
    if getattr(sys, "frozen", False)
    else Path(__file__).resolve().parents[1]
)


def _find_env_file(name: str) -> Path | None:
    return next(
        (base / name for base in (Path.cwd(), PROJECT_ROOT) if (base / name).is_file()),
        None,
    )


def load_env() -> None:
    """Load `.env`, then let `.env.<APP_ENV>` override it."""
    base_file = _find_env_file(".env")
    if base_file:
        load_dotenv(base_file)
    env_file = _find_env_file(f".env.{os.getenv('APP_ENV', 'development')}")
    if env_file:
        load_dotenv(env_file, override=True)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from None


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    notification_ms: int = 3000
    remove_delay_ms: int = 300


load_env()

DATABASE_URL = (
    os.getenv("TASKFLOW_DATABASE_URL", "").strip()
    or f"sqlite:///{PROJECT_ROOT / 'taskflow.sqlite3'}"
)

SETTINGS = Settings(
    database_url=DATABASE_URL,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    log_dir=os.getenv("LOG_DIR", "logs"),
    notification_ms=_int_env("TASKFLOW_NOTIFICATION_MS", 3000),
    remove_delay_ms=_int_env("TASKFLOW_REMOVE_DELAY_MS", 300),
)
