"""Key-value backends the task repository persists into.

The interface mirrors browser local storage: string keys, string values,
``None`` for a missing key.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .db import create_db_engine, create_session_factory, init_db
from .models import StorageEntryModel

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backend could not complete a read or write."""


class StorageQuotaExceeded(StorageError):
    pass


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_items(self, items: Mapping[str, str]) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryKeyValueStorage:
    def __init__(self, initial: Mapping[str, str] | None = None, quota_bytes: int | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        merged = {**self.items, **items}
        if self.quota_bytes is not None:
            used = sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in merged.items())
            if used > self.quota_bytes:
                raise StorageQuotaExceeded(f"storage quota of {self.quota_bytes} bytes exceeded ({used})")
        self.items = merged

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class SqlKeyValueStorage:
    def __init__(self, database_url: str | None = None, *, engine: Engine | None = None) -> None:
        if engine is None and not database_url:
            raise ValueError("database_url or engine is required")
        try:
            if engine is None:
                engine = create_db_engine(database_url)
            init_db(engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot open storage: {exc}") from exc
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        logger.info("SqlKeyValueStorage ready url=%s", engine.url.render_as_string(hide_password=True))

    def get_item(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                return session.scalar(select(StorageEntryModel.value).where(StorageEntryModel.key == key))
        except SQLAlchemyError as exc:
            raise StorageError(f"read of {key!r} failed: {exc}") from exc

    def set_items(self, items: Mapping[str, str]) -> None:
        try:
            with self._session_factory() as session:
                for key, value in items.items():
                    entry = session.get(StorageEntryModel, key)
                    if entry is None:
                        session.add(StorageEntryModel(key=key, value=value))
                    else:
                        entry.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"write of {sorted(items)} failed: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                session.execute(delete(StorageEntryModel).where(StorageEntryModel.key == key))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageError(f"delete of {key!r} failed: {exc}") from exc

    def close(self) -> None:
        self._engine.dispose()
