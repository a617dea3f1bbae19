"""Database layer for liftlog."""

from .engine import get_db_path, init_db, open_db
from .errors import (
    ExerciseNotFoundError,
    NotFoundError,
    StoreError,
    TemplateNotFoundError,
    WorkoutNotFoundError,
)
from .store import WorkoutStore, close_store, get_store

__all__ = [
    "ExerciseNotFoundError",
    "get_db_path",
    "get_store",
    "close_store",
    "init_db",
    "NotFoundError",
    "open_db",
    "StoreError",
    "TemplateNotFoundError",
    "WorkoutNotFoundError",
    "WorkoutStore",
]
