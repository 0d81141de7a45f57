"""SQLModel implementation of the habit store."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Callable, ContextManager, Iterable, Mapping, Optional

from sqlmodel import Session, select

from ...models.habit import Habit
from ...models.storage import StoredValue

logger = logging.getLogger(__name__)

HABITS_KEY = "habits"


class SQLModelHabitStore:
    """Keeps the habit list as one JSON document under a single key."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]], key: str = HABITS_KEY):
        """Initialize with a session factory."""
        self.session_factory = session_factory
        self.key = key

    def _get(self, session: Session) -> Optional[StoredValue]:
        return session.exec(select(StoredValue).where(StoredValue.key == self.key)).first()

    def load_habits(self) -> list[Habit]:
        with self.session_factory() as session:
            row = self._get(session)
            raw = row.value if row else None

        if not raw:
            return []
        try:
            records = json.loads(raw)
            if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
                raise ValueError("stored habits are not a list of objects")
            habits = [Habit.from_dict(record) for record in records]
        except (TypeError, ValueError, KeyError) as exc:
            logger.error("Failed to load habits from storage: %s", exc, extra={"key": self.key})
            return []
        return sorted(habits, key=lambda h: h.order)

    def save_habits(self, habits: Iterable[Habit]) -> None:
        payload = json.dumps([habit.to_dict() for habit in habits], ensure_ascii=False)
        with self.session_factory() as session:
            row = self._get(session)
            if row:
                row.value = payload
                row.updated_at = datetime.now(timezone.utc)
            else:
                row = StoredValue(key=self.key, value=payload)
            session.add(row)
            session.commit()


__all__ = ["HABITS_KEY", "SQLModelHabitStore"]
