from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

MAX_TEXT_LENGTH = 100


def utcnow() -> datetime:
    # Stored timestamps carry millisecond precision, so drop the rest up front.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


@dataclass(frozen=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: datetime
    completed_at: Optional[datetime] = None

