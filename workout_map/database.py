"""Database session and base model setup for the SQL key-value medium."""
from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from workout_map.config import get_settings


settings = get_settings()
# SQL statement logging is switched on by logging_config when DEBUG is set.
engine = create_engine(settings.database_url, future=True)


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Iterator[Session]:
    """Yield a transactional session, committing on success."""
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _ensure_sqlite_directory(bind: Engine) -> None:
    url = bind.url
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_db(bind: Engine = engine) -> None:
    """Create the key-value table if it does not exist yet."""

    # Imported for its side effect of registering the table on Base.metadata.
    from workout_map.models import database_models  # noqa: F401

    _ensure_sqlite_directory(bind)
    Base.metadata.create_all(bind)
