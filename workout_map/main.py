"""Assembly of a workout map session from settings and UI collaborators."""
from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from workout_map import database
from workout_map.config import Settings, get_settings
from workout_map.logging_config import configure_logging
from workout_map.services.collaborators import FormCollaborator, WorkoutListCollaborator
from workout_map.services.key_value import InMemoryKeyValueStore, KeyValueStore, SqlKeyValueStore
from workout_map.services.orchestrator import WorkoutContext


logger = logging.getLogger(__name__)


def create_kv_store(settings: Settings) -> KeyValueStore:
    """Return the persistence medium selected by ``STORAGE_BACKEND``."""

    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.database_url == database.settings.database_url:
        database.init_db(database.engine)
        return SqlKeyValueStore(database.SessionLocal)

    bind = create_engine(settings.database_url, future=True)
    database.init_db(bind)
    return SqlKeyValueStore(sessionmaker(bind=bind, autoflush=False, autocommit=False, future=True))


def build_context(
    form: FormCollaborator,
    list_view: WorkoutListCollaborator,
    settings: Settings | None = None,
    kv: KeyValueStore | None = None,
) -> WorkoutContext:
    """
    Create a session context; call ``orchestrator.start`` once the map is up.

    Args:
        form: Workout form layer
        list_view: Workout list layer
        settings: Settings to use (defaults to the cached environment settings)
        kv: Persistence medium (defaults to the one named in settings)
    """
    settings = settings or get_settings()
    configure_logging(settings)
    if kv is None:
        kv = create_kv_store(settings)
    logger.info("Using %s storage under key %r", type(kv).__name__, settings.storage_key)
    return WorkoutContext(
        form=form,
        list_view=list_view,
        kv=kv,
        storage_key=settings.storage_key,
        zoom=settings.map_zoom,
    )
