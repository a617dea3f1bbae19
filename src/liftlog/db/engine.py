"""Database engine setup and initialization."""

import logging
from pathlib import Path

import aiosqlite

from ..config import get_settings

logger = logging.getLogger(__name__)

DB_FILENAME = "liftlog.db"

# Table and column names are the on-disk format; existing databases depend on them.
SCHEMA = """
CREATE TABLE IF NOT EXISTS exercises (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    muscleGroup TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS workouts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    date TEXT NOT NULL,
    duration INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS workout_exercises (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    workout_id INTEGER NOT NULL,
    exercise_id INTEGER NOT NULL,
    sets INTEGER NOT NULL,
    reps INTEGER NOT NULL,
    weight REAL NOT NULL,
    FOREIGN KEY (workout_id) REFERENCES workouts (id) ON DELETE CASCADE,
    FOREIGN KEY (exercise_id) REFERENCES exercises (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS workout_templates (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS template_exercises (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    template_id INTEGER NOT NULL,
    exercise_id INTEGER NOT NULL,
    set_count INTEGER NOT NULL,
    target_reps INTEGER NOT NULL,
    target_weight REAL,
    order_index INTEGER NOT NULL,
    FOREIGN KEY (template_id) REFERENCES workout_templates (id) ON DELETE CASCADE,
    FOREIGN KEY (exercise_id) REFERENCES exercises (id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_workouts_date
ON workouts(date);

CREATE INDEX IF NOT EXISTS idx_workout_exercises_workout
ON workout_exercises(workout_id);

CREATE INDEX IF NOT EXISTS idx_template_exercises_template
ON template_exercises(template_id, order_index);
"""


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_settings().data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_FILENAME


async def open_db(db_path: Path) -> aiosqlite.Connection:
    """Open (or create) the database and make sure the schema exists.

    Foreign keys are switched on for the connection, since SQLite leaves them
    off by default and the cascades depend on them. The journal is put in WAL
    mode so readers are not blocked by a writer.
    """
    db = await aiosqlite.connect(db_path)
    try:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys = ON")
        cursor = await db.execute("PRAGMA journal_mode = WAL")
        row = await cursor.fetchone()
        logger.debug("Journal mode for %s: %s", db_path, row[0] if row else "unknown")
        await db.executescript(SCHEMA)
        await db.commit()
    except Exception:
        await db.close()
        raise
    return db


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    db = await open_db(db_path)
    await db.close()
