"""Key-value media the workout snapshot is written to."""
from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from workout_map.database import SessionLocal, session_scope
from workout_map.models.database_models import KeyValueEntry


logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Contract of the persistence medium: text values under string keys."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryKeyValueStore:
    """Process-local medium; contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def clear(self) -> None:
        self._data.clear()


class SqlKeyValueStore:
    """Medium backed by the ``key_value_entries`` table."""

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        with session_scope(self._session_factory) as db:
            return db.execute(
                select(KeyValueEntry.value).where(KeyValueEntry.key == key)
            ).scalar_one_or_none()

    def set(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as db:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug("Stored %d characters under %r", len(value), key)

    def clear(self) -> None:
        with session_scope(self._session_factory) as db:
            result = db.execute(delete(KeyValueEntry))
        logger.info("Cleared %d key-value entries", result.rowcount)
