"""Logging for workout map sessions.

Package loggers (``workout_map.*``) follow ``LOG_LEVEL``; SQLAlchemy's engine
logger only emits statements when ``DEBUG`` is on. Everything goes to the
console and to ``<LOG_DIR>/workout_map.log``.
"""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from workout_map.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def build_logging_config(log_file: Path, level: str, sql_echo: bool) -> dict:
    """Return the ``dictConfig`` payload for one session."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"session": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "session"},
            "session_file": {
                "class": "logging.FileHandler",
                "filename": str(log_file),
                "encoding": "utf-8",
                "formatter": "session",
            },
        },
        "loggers": {
            "workout_map": {"level": level},
            "sqlalchemy.engine": {"level": "INFO" if sql_echo else "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console", "session_file"]},
    }


def configure_logging(settings: Settings | None = None) -> None:
    """Install the session logging config; later calls are no-ops."""

    global _configured
    if _configured:
        return

    if settings is None:
        try:
            # get_settings creates the log directory itself.
            settings = get_settings()
        except ValidationError:
            # A broken .env must not stop the session from logging why.
            settings = Settings.model_construct()
            Path(settings.log_dir).mkdir(parents=True, exist_ok=True)
    else:
        Path(settings.log_dir).mkdir(parents=True, exist_ok=True)

    log_file = Path(settings.log_dir) / "workout_map.log"
    dictConfig(build_logging_config(log_file, settings.log_level, settings.debug))
    _configured = True
