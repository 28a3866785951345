from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text

from taskflow.domain.entities import utcnow

from .db import Base


class StorageEntryModel(Base):
    __tablename__ = "storage_entries"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
