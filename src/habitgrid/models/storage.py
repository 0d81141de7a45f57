"""Opaque key-value rows backing the habit store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar

from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredValue(SQLModel, table=True):
    """Key-value storage for serialized application state."""

    __tablename__: ClassVar[str] = "stored_value"

    key: str = Field(primary_key=True, max_length=64)
    value: str = Field(nullable=False, default="")
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
